from __future__ import annotations
from enum import Enum


class Token(Enum):
    """PowerShell operators and literal kinds. `str(tok)` is the surface spelling."""

    NONE = ""
    ADD = "+"
    SUB = "-"
    ASSIGN = "="
    ADD_ASSIGN = "+="
    BITAND = "&"  # call operator
    AND = "-and"
    EQ = "-eq"
    NE = "-ne"
    LT = "-lt"
    GT = "-gt"
    INC = "++"
    DEC = "--"
    DOUBLE_DOT = ".."

    STRING = "<string>"
    NUMBER = "<number>"
    BOOL = "<bool>"

    def __str__(self) -> str:
        return self.value
