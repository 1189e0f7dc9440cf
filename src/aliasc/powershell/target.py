from __future__ import annotations
from typing import Any, List, Sequence

from ..config import FLAG_STRING, quote_meta
from ..target import GENERATED, FlagCase, Target
from . import ast as A
from .printer import format_powershell
from .token import Token

ARGS = "args"
NON_MATCHED = "non_matched_args"


def escape_string(text: str) -> str:
    """Make `text` literal inside a double-quoted PowerShell string."""
    return text.replace("`", "``").replace('"', '`"').replace("$", "`$")


def _regex_case(tokens: Sequence[str]) -> str:
    alts = "|".join(quote_meta(t) for t in tokens).replace("'", "''")
    return f"'^(?:{alts})$'"


class PowerShellTarget(Target):
    name = "powershell"
    suffix = ".ps1"
    ast = A

    def positional(self, index: int) -> str:
        return f'"$(${ARGS}[{index}])"'

    def env(self, var: str) -> str:
        return f"$env:{var}"

    def new_file(self) -> A.File:
        return A.File([A.docs(GENERATED)])

    def declare_executable(self, var: str, path: str) -> List[A.Stmt]:
        return [A.assign(A.ref(var), A.string(path))]

    def guard(self, cmd_name: str, body: Sequence[A.Stmt]) -> A.IfStmt:
        args = A.ref(ARGS)
        rest = A.index(args, A.binary(A.number(1), Token.DOUBLE_DOT, A.selector(args, "Length")))
        return A.IfStmt(
            cond=A.binary(A.index(args, A.number(0)), Token.EQ, A.string(cmd_name)),
            body=A.block(A.assign(args, rest), *body),
        )

    def save_args(self, ident: str) -> A.AssignStmt:
        return A.assign(A.ref(f"temp_args_{ident}"), A.ref(ARGS))

    def restore_args(self, ident: str) -> A.AssignStmt:
        return A.assign(A.ref(ARGS), A.ref(f"temp_args_{ident}"))

    def declare_flag(self, var: str, type: str) -> A.AssignStmt:
        return A.assign(A.ref(var), A.NULL if type == FLAG_STRING else A.FALSE)

    def init_non_matched(self) -> A.AssignStmt:
        return A.assign(A.ref(NON_MATCHED), A.raw("@()"))

    def flag_loop(self, cases: Sequence[FlagCase]) -> A.ForStmt:
        args, i = A.ref(ARGS), A.ref("i")
        sw = A.SwitchStmt(
            cond=A.index(args, i),
            mode=A.MatchMode.REGEX,
            default=A.CaseStmt(body=A.block(
                A.AssignStmt(A.ref(NON_MATCHED), A.index(args, i), Token.ADD_ASSIGN),
            )),
        )
        for c in cases:
            if c.type == FLAG_STRING:
                body = A.block(
                    A.assign(A.ref(c.var), A.index(args, A.binary(i, Token.ADD, A.number(1)))),
                    A.ExprStmt(A.IncDecExpr(i, Token.INC)),
                )
            else:
                body = A.block(A.assign(A.ref(c.var), A.TRUE))
            sw.cases.append(A.CaseStmt(A.raw(_regex_case(c.tokens)), body))
        return A.ForStmt(
            init=A.binary(i, Token.ASSIGN, A.number(0)),
            cond=A.binary(i, Token.LT, A.selector(args, "Length")),
            post=A.IncDecExpr(i, Token.INC),
            body=A.block(sw),
        )

    def flag_test(self, var: str, type: str) -> A.Expr:
        if type == FLAG_STRING:
            # $null on the left so arrays are not filtered
            return A.binary(A.NULL, Token.NE, A.ref(var))
        return A.binary(A.ref(var), Token.NE, A.FALSE)

    def conjunction(self, x: A.Expr, y: A.Expr) -> A.BinaryExpr:
        return A.binary(x, Token.AND, y)

    def help(self, text: str) -> List[A.Stmt]:
        return [A.call("Write-Host", A.string(escape_string(text)))]

    def forward(self, executable: str, non_matched: bool) -> A.CallStmt:
        forwarded = NON_MATCHED if non_matched else ARGS
        return A.CallStmt(A.ref(executable), [A.ref(forwarded)], Token.BITAND)

    def format(self, node: Any) -> str:
        return format_powershell(node)
