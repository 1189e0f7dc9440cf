"""Target capability shared by the script builder.

A target knows how to spell the leaf constructs the builder needs in one
shell language and how to print the resulting tree. Control flow that is
shaped the same in both languages lives here once.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import ModuleType
from typing import Any, List, Optional, Sequence, Tuple

GENERATED = " Code generated by aliasc. DO NOT EDIT."

_NON_WORD = re.compile(r"\W")


def ident_part(name: str) -> str:
    """Make a command or flag name usable inside a shell variable name."""
    return _NON_WORD.sub("_", name)


def scoped(ident: str, name: str) -> str:
    return f"{ident}_{ident_part(name)}"


@dataclass(frozen=True)
class FlagCase:
    tokens: Tuple[str, ...]
    var: str
    type: str


class Target(ABC):
    name: str = ""
    suffix: str = ""
    ast: ModuleType

    # ------------------------------------------------------------ placeholders
    @abstractmethod
    def positional(self, index: int) -> str: ...

    def named(self, ident: str, name: str) -> str:
        return "${" + scoped(ident, name) + "}"

    @abstractmethod
    def env(self, var: str) -> str: ...

    # --------------------------------------------------------------- structure
    @abstractmethod
    def new_file(self) -> Any: ...

    @abstractmethod
    def declare_executable(self, var: str, path: str) -> List[Any]: ...

    @abstractmethod
    def guard(self, cmd_name: str, body: Sequence[Any]) -> Any:
        """`if args[0] == cmd_name: shift args by one; body`."""

    @abstractmethod
    def save_args(self, ident: str) -> Any: ...

    @abstractmethod
    def restore_args(self, ident: str) -> Any: ...

    @abstractmethod
    def declare_flag(self, var: str, type: str) -> Any: ...

    @abstractmethod
    def init_non_matched(self) -> Any: ...

    @abstractmethod
    def flag_loop(self, cases: Sequence[FlagCase]) -> Any: ...

    @abstractmethod
    def flag_test(self, var: str, type: str) -> Any: ...

    @abstractmethod
    def conjunction(self, x: Any, y: Any) -> Any: ...

    @abstractmethod
    def help(self, text: str) -> List[Any]: ...

    @abstractmethod
    def forward(self, executable: str, non_matched: bool) -> Any: ...

    @abstractmethod
    def format(self, node: Any) -> str: ...

    # ------------------------------------------------------------------ shared
    def exit(self) -> Any:
        return self.ast.CallStmt(self.ast.Ident("exit"))

    def call_lines(self, text: str) -> List[Any]:
        """One call statement per non-empty line of a resolved `run` body."""
        return [self.ast.CallStmt(self.ast.Ident(line.rstrip())) for line in text.split("\n") if line.strip()]

    def all_of(self, tests: Sequence[Any]) -> Any:
        cond = tests[0]
        for t in tests[1:]:
            cond = self.conjunction(cond, t)
        return cond

    def if_chain(self, branches: Sequence[Tuple[Any, List[Any]]], otherwise: Optional[List[Any]] = None) -> Any:
        """Build `if/elif/.../else` keeping the order of `branches`."""
        A = self.ast
        root = None
        tail = None
        for cond, body in branches:
            node = A.IfStmt(cond=cond, body=A.BlockStmt(list(body)))
            if root is None:
                root = node
            else:
                tail.else_ = node
            tail = node
        if otherwise is not None and tail is not None:
            tail.else_ = A.BlockStmt(list(otherwise))
        return root
