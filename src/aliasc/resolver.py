"""Placeholder rewriting for `run` bodies.

Three placeholder families are understood:

    {{ $N }}          positional argument, N >= 1
    {{ .Name }}       value of a declared flag (Name may contain `-`)
    {{ $env.VAR }}    environment variable (any `$ns.` prefix is accepted)

Anything else between double braces is left exactly as written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Pattern, Protocol


class PlaceholderSyntax(Protocol):
    def positional(self, index: int) -> str: ...
    def named(self, ident: str, name: str) -> str: ...
    def env(self, var: str) -> str: ...


@dataclass(frozen=True)
class Resolver:
    pattern: Pattern[str]

    @classmethod
    def compile(cls, regex: str) -> "Resolver":
        return cls(re.compile(regex))

    def apply(self, raw: str, repl: Callable[[str], Optional[str]]) -> str:
        """Substitute every match; `repl` returning None keeps the match verbatim."""
        def _sub(m: "re.Match[str]") -> str:
            out = repl(m.group(1))
            return m.group(0) if out is None else out
        return self.pattern.sub(_sub, raw)


@dataclass(frozen=True)
class ResolverSet:
    index: Resolver
    named: Resolver
    env: Resolver

    def substitute(
        self,
        text: str,
        *,
        index: Callable[[str], Optional[str]],
        named: Optional[Callable[[str], Optional[str]]] = None,
        env: Callable[[str], Optional[str]],
    ) -> str:
        """Rewrite all three families in one pass over `text`.

        Substituted values are never scanned again, so a value that itself
        looks like a placeholder is kept as written. A callback returning
        None, or a missing `named`, keeps the match verbatim.
        """
        families = (self.index, self.named, self.env)
        combined = re.compile("|".join(r.pattern.pattern for r in families))

        def _sub(m: "re.Match[str]") -> str:
            pos, name, var = m.group(1), m.group(2), m.group(3)
            if pos is not None:
                out = index(pos)
            elif name is not None:
                out = named(name) if named is not None else None
            else:
                out = env(var)
            return m.group(0) if out is None else out
        return combined.sub(_sub, text)

    def resolve(
        self,
        text: str,
        syntax: PlaceholderSyntax,
        *,
        ident: Optional[str] = None,
        flags: Iterable[str] = (),
    ) -> str:
        """Rewrite to target syntax; named placeholders only when `ident` is given."""
        def _index(m: str) -> Optional[str]:
            n = int(m)
            if n < 1:
                return None
            return syntax.positional(n - 1)

        known = set(flags)

        def _named(name: str) -> Optional[str]:
            return syntax.named(ident, name) if name in known else None

        return self.substitute(
            text, index=_index, named=_named if ident is not None else None, env=syntax.env
        )


RESOLVERS = ResolverSet(
    index=Resolver.compile(r"\{\{\s*\$(\d+)\s*\}\}"),
    named=Resolver.compile(r"\{\{\s*\.([\w-]+)\s*\}\}"),
    env=Resolver.compile(r"\{\{\s*\$\w+\.(\w+)\s*\}\}"),
)
