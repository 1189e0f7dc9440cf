from __future__ import annotations
from typing import List

from ..diagnostics import PrinterError
from . import ast as A
from .token import Token

IND = " " * 2


def format_powershell(node: A.Node) -> str:
    if isinstance(node, A.Expr):
        return _fmt_expr(node)
    if isinstance(node, A.File):
        lines: List[str] = []
        for st in node.stmts:
            lines.extend(_fmt_stmt(st, 0))
    else:
        lines = _fmt_stmt(node, 0)
    return "".join(line + "\n" for line in lines)


def _unknown(node: object) -> PrinterError:
    return PrinterError.make(
        "ALX-AST-0001",
        f"powershell printer has no case for {type(node).__name__}",
        "the builder produced a node this printer does not know; this is a bug",
    )


def _body(body: A.BlockStmt, level: int) -> List[str]:
    lines: List[str] = []
    for st in body.stmts:
        lines.extend(_fmt_stmt(st, level + 1))
    return lines


def _cond(e: A.Expr) -> str:
    if e is None:
        raise PrinterError.make("ALX-AST-0001", "if statement without condition")
    return f"({_fmt_expr(e)})"


def _fmt_stmt(st: A.Node, level: int) -> List[str]:
    pad = IND * level
    if isinstance(st, A.BlockStmt):
        lines: List[str] = []
        for s in st.stmts:
            lines.extend(_fmt_stmt(s, level))
        return lines
    if isinstance(st, A.IfStmt):
        lines = [f"{pad}if {_cond(st.cond)} {{"]
        lines.extend(_body(st.body, level))
        el = st.else_
        while el is not None:
            if isinstance(el, A.IfStmt):
                lines.append(f"{pad}}} elseif {_cond(el.cond)} {{")
                lines.extend(_body(el.body, level))
                el = el.else_
            elif isinstance(el, A.BlockStmt):
                lines.append(f"{pad}}} else {{")
                lines.extend(_body(el, level))
                el = None
            else:
                raise _unknown(el)
        lines.append(f"{pad}}}")
        return lines
    if isinstance(st, A.ForStmt):
        lines = [f"{pad}for ({_fmt_expr(st.init)}; {_fmt_expr(st.cond)}; {_fmt_expr(st.post)}) {{"]
        lines.extend(_body(st.body, level))
        lines.append(f"{pad}}}")
        return lines
    if isinstance(st, A.SwitchStmt):
        mode = f"{st.mode.value} " if st.mode.value else ""
        lines = [f"{pad}switch {mode}({_fmt_expr(st.cond)}) {{"]
        for c in st.cases:
            lines.append(f"{pad}{IND}{_fmt_expr(c.cond)} {{")
            lines.extend(_body(c.body, level + 1))
            lines.append(f"{pad}{IND}}}")
        if st.default is not None:
            lines.append(f"{pad}{IND}default {{")
            lines.extend(_body(st.default.body, level + 1))
            lines.append(f"{pad}{IND}}}")
        lines.append(f"{pad}}}")
        return lines
    if isinstance(st, A.ExprStmt):
        return [pad + _fmt_expr(st.x)]
    if isinstance(st, A.AssignStmt):
        return [f"{pad}{_fmt_expr(st.lhs)} {st.op} {_fmt_expr(st.rhs)}"]
    if isinstance(st, A.CallStmt):
        parts = [_fmt_expr(st.func)] + [_fmt_expr(r) for r in st.recv]
        if st.op == Token.BITAND:
            parts.insert(0, str(Token.BITAND))
        return [pad + " ".join(parts)]
    if isinstance(st, A.Comment):
        return [f"{pad}#{st.text}"]
    raise _unknown(st)


def _fmt_expr(e: A.Expr) -> str:
    if isinstance(e, A.Ident):
        return e.name
    if isinstance(e, A.RefExpr):
        return "$" + _fmt_expr(e.x)
    if isinstance(e, A.BasicExpr):
        if e.kind == Token.STRING:
            return f'"{e.value}"'
        return e.value
    if isinstance(e, A.BinaryExpr):
        if e.op == Token.DOUBLE_DOT:
            return f"{_fmt_expr(e.x)}..{_fmt_expr(e.y)}"
        return f"{_fmt_expr(e.x)} {e.op} {_fmt_expr(e.y)}"
    if isinstance(e, A.IndexExpr):
        return f"{_fmt_expr(e.x)}[{_fmt_expr(e.key)}]"
    if isinstance(e, A.SelectorExpr):
        return f"{_fmt_expr(e.x)}.{_fmt_expr(e.sel)}"
    if isinstance(e, A.IncDecExpr):
        return f"{_fmt_expr(e.x)}{e.op}"
    raise _unknown(e)
