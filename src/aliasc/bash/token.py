from __future__ import annotations
from enum import Enum


class Token(Enum):
    """Bash operators and literal kinds. `str(tok)` is the surface spelling."""

    ADD = "+"
    SUB = "-"
    ASSIGN = "="
    ADD_ASSIGN = "+="
    BITAND = "&"
    AND = "&&"
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    INC = "++"
    DEC = "--"
    DOUBLE_DOT = ".."

    # literal kinds carry no spelling of their own
    STRING = "<string>"
    NUMBER = "<number>"
    BOOL = "<bool>"

    def __str__(self) -> str:
        return self.value


# operators printed with surrounding spaces; everything else is glued
SPACED = {Token.EQ, Token.NE, Token.AND}
