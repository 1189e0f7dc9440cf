"""Bash AST.

Nodes only keep the structure needed to regenerate source text. Nothing
here checks that identifiers exist or that operators make sense for their
operands; the builder is responsible for feeding sane trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .token import Token


class Node:
    pass


class Expr(Node):
    pass


class Stmt(Node):
    pass


# ---------------------------------------------------------------- expressions

@dataclass
class Ident(Expr):
    name: str


@dataclass
class RefExpr(Expr):
    """`$name` for a bare identifier, `${...}` for anything compound."""
    x: Expr


@dataclass
class IndexExpr(Expr):
    x: Expr
    key: Expr


@dataclass
class SelectorExpr(Expr):
    x: Expr
    sel: Expr


@dataclass
class BinaryExpr(Expr):
    x: Expr
    op: Token
    y: Expr


@dataclass
class IncDecExpr(Expr):
    x: Expr
    op: Token
    prefix: bool = False


@dataclass
class BasicExpr(Expr):
    kind: Token
    value: str


# ----------------------------------------------------------------- statements

@dataclass
class BlockStmt(Stmt):
    stmts: List[Stmt] = field(default_factory=list)

    def append(self, *stmts: Stmt) -> "BlockStmt":
        self.stmts.extend(stmts)
        return self


@dataclass
class IfStmt(Stmt):
    cond: Optional[Expr] = None
    body: BlockStmt = field(default_factory=BlockStmt)
    # another IfStmt renders as `elif`, a BlockStmt as the terminal `else`
    else_: Optional[Union["IfStmt", BlockStmt]] = None


@dataclass
class ForStmt(Stmt):
    init: Expr
    cond: Expr
    post: Expr
    body: BlockStmt = field(default_factory=BlockStmt)


@dataclass
class CaseStmt(Stmt):
    cond: Optional[Expr] = None
    body: BlockStmt = field(default_factory=BlockStmt)


@dataclass
class SwitchStmt(Stmt):
    cond: Expr
    cases: List[CaseStmt] = field(default_factory=list)
    default: Optional[CaseStmt] = None


@dataclass
class AssignStmt(Stmt):
    lhs: Expr
    rhs: Expr
    op: Token = Token.ASSIGN


@dataclass
class ExprStmt(Stmt):
    x: Expr


@dataclass
class CallStmt(Stmt):
    func: Expr
    recv: List[Expr] = field(default_factory=list)


@dataclass
class Comment(Stmt):
    text: str


@dataclass
class File(Node):
    stmts: List[Stmt] = field(default_factory=list)

    def append(self, *stmts: Stmt) -> "File":
        self.stmts.extend(stmts)
        return self


# ------------------------------------------------------------------- helpers

def identifier(name: str) -> Ident:
    return Ident(name)


def raw(text: str) -> Ident:
    # printed verbatim
    return Ident(text)


def raw_stmt(text: str) -> ExprStmt:
    return ExprStmt(Ident(text))


def ref(name: str) -> RefExpr:
    return RefExpr(Ident(name))


def string(value: str) -> BasicExpr:
    return BasicExpr(Token.STRING, value)


def number(value: int) -> BasicExpr:
    return BasicExpr(Token.NUMBER, str(value))


def binary(x: Expr, op: Token, y: Expr) -> BinaryExpr:
    return BinaryExpr(x, op, y)


def index(x: Expr, key: Expr) -> IndexExpr:
    return IndexExpr(x, key)


def assign(lhs: Expr, rhs: Expr) -> AssignStmt:
    return AssignStmt(lhs, rhs)


def call(func: str, *recv: Expr) -> CallStmt:
    return CallStmt(Ident(func), list(recv))


def docs(text: str) -> Comment:
    return Comment(text)


def block(*stmts: Stmt) -> BlockStmt:
    return BlockStmt(list(stmts))


TRUE = BasicExpr(Token.BOOL, "true")
FALSE = BasicExpr(Token.BOOL, "false")
