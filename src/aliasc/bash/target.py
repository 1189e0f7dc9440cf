from __future__ import annotations
from typing import Any, List, Sequence

from ..config import FLAG_STRING, quote_meta
from ..target import GENERATED, FlagCase, Target
from . import ast as A
from .printer import format_bash
from .token import Token

ARGS = "args"
NON_MATCHED = "non_matched_args"
HELP_EOF = "EOF"


def heredoc_delimiter(text: str) -> str:
    """`EOF`, lengthened until no line of `text` would end the heredoc early."""
    lines = set(text.split("\n"))
    eof = HELP_EOF
    while eof in lines:
        eof += "_"
    return eof


class BashTarget(Target):
    name = "bash"
    suffix = ".sh"
    ast = A

    def positional(self, index: int) -> str:
        return f'"${{{ARGS}[{index}]}}"'

    def env(self, var: str) -> str:
        return "${" + var + "}"

    def new_file(self) -> A.File:
        return A.File([
            A.docs("!/bin/bash"),
            A.docs(GENERATED),
            A.raw_stmt("set -e"),
            A.assign(A.identifier(ARGS), A.raw('("$@")')),
        ])

    def declare_executable(self, var: str, path: str) -> List[A.Stmt]:
        return [A.assign(A.identifier(var), A.string(path))]

    def guard(self, cmd_name: str, body: Sequence[A.Stmt]) -> A.IfStmt:
        first = A.RefExpr(A.index(A.identifier(ARGS), A.number(0)))
        shift = A.assign(A.identifier(ARGS), A.raw(f'("${{{ARGS}[@]:1}}")'))
        return A.IfStmt(
            cond=A.binary(first, Token.EQ, A.string(cmd_name)),
            body=A.block(shift, *body),
        )

    def save_args(self, ident: str) -> A.AssignStmt:
        return A.assign(A.identifier(f"temp_args_{ident}"), A.raw(f'("${{{ARGS}[@]}}")'))

    def restore_args(self, ident: str) -> A.AssignStmt:
        return A.assign(A.identifier(ARGS), A.raw(f'("${{temp_args_{ident}[@]}}")'))

    def declare_flag(self, var: str, type: str) -> A.AssignStmt:
        return A.assign(A.identifier(var), A.string("") if type == FLAG_STRING else A.FALSE)

    def init_non_matched(self) -> A.AssignStmt:
        return A.assign(A.identifier(NON_MATCHED), A.raw("()"))

    def flag_loop(self, cases: Sequence[FlagCase]) -> A.ForStmt:
        sw = A.SwitchStmt(
            cond=A.string(f"${{{ARGS}[i]}}"),
            default=A.CaseStmt(body=A.block(
                A.AssignStmt(A.identifier(NON_MATCHED), A.raw(f'("${{{ARGS}[i]}}")'), Token.ADD_ASSIGN),
            )),
        )
        for c in cases:
            pattern = A.raw("|".join(quote_meta(t) for t in c.tokens))
            if c.type == FLAG_STRING:
                body = A.block(
                    A.assign(A.identifier(c.var), A.string(f"${{{ARGS}[i+1]}}")),
                    A.ExprStmt(A.IncDecExpr(A.identifier("i"), Token.INC, prefix=True)),
                )
            else:
                body = A.block(A.assign(A.identifier(c.var), A.TRUE))
            sw.cases.append(A.CaseStmt(pattern, body))
        return A.ForStmt(
            init=A.binary(A.identifier("i"), Token.ASSIGN, A.number(0)),
            cond=A.binary(A.identifier("i"), Token.LT, A.raw(f"${{#{ARGS}[@]}}")),
            post=A.IncDecExpr(A.identifier("i"), Token.INC),
            body=A.block(sw),
        )

    def flag_test(self, var: str, type: str) -> A.Expr:
        if type == FLAG_STRING:
            return A.raw(f'-n "${var}"')
        return A.binary(A.ref(var), Token.EQ, A.TRUE)

    def conjunction(self, x: A.Expr, y: A.Expr) -> A.BinaryExpr:
        return A.binary(x, Token.AND, y)

    def help(self, text: str) -> List[A.Stmt]:
        # quoted delimiter: no expansion inside the help text
        eof = heredoc_delimiter(text)
        return [A.call("cat", A.raw(f"<<'{eof}'\n{text}\n{eof}"))]

    def forward(self, executable: str, non_matched: bool) -> A.CallStmt:
        forwarded = NON_MATCHED if non_matched else ARGS
        return A.CallStmt(A.string(f"${executable}"), [A.raw(f'"${{{forwarded}[@]}}"')])

    def format(self, node: Any) -> str:
        return format_bash(node)
