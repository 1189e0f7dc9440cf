"""PowerShell AST.

Same closed node set as the bash tree plus the two PowerShell-only knobs:
the match mode of a `switch` and the call operator of a call statement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .token import Token


class Node:
    pass


class Expr(Node):
    pass


class Stmt(Node):
    pass


class MatchMode(Enum):
    DEFAULT = ""
    REGEX = "-regex"


# ---------------------------------------------------------------- expressions

@dataclass
class Ident(Expr):
    name: str


@dataclass
class RefExpr(Expr):
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
    mode: MatchMode = MatchMode.DEFAULT


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
    # Token.BITAND invokes through a stored path: `& $executable ...`
    op: Token = Token.NONE


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
    return Ident(text)


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


def selector(x: Expr, sel: str) -> SelectorExpr:
    return SelectorExpr(x, Ident(sel))


def assign(lhs: Expr, rhs: Expr) -> AssignStmt:
    return AssignStmt(lhs, rhs)


def call(func: str, *recv: Expr, op: Token = Token.NONE) -> CallStmt:
    return CallStmt(Ident(func), list(recv), op)


def docs(text: str) -> Comment:
    return Comment(text)


def block(*stmts: Stmt) -> BlockStmt:
    return BlockStmt(list(stmts))


NULL = RefExpr(Ident("null"))
TRUE = RefExpr(Ident("true"))
FALSE = RefExpr(Ident("false"))
