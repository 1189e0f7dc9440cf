from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

# Codes:
#   ALX-CFG-0001  configuration does not match the schema
#   ALX-CFG-0101  manual `help` flag while help is enabled
#   ALX-CFG-0102  duplicate flag name or alias in one command
#   ALX-CFG-0103  match pattern names an undeclared flag
#   ALX-CFG-0104  script name shadows a built-in subcommand
#   ALX-CFG-0105  sibling subcommands fold to the same identifier
#   ALX-IO-0001   generated output already exists (no force)
#   ALX-IO-0002   extension executable not found on PATH
#   ALX-IO-0003   configuration file missing or unreadable
#   ALX-IO-0004   no template with the requested name
#   ALX-IO-0005   template directory not writable
#   ALX-AST-0001  node kind without a printer case
#   ALX-RUN-0001  unknown workspace script
#   ALX-RUN-0002  workspace script exited non-zero


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    remediation: str = ""
    origin: Optional[str] = None

    def render(self) -> str:
        head = f"{self.code} {self.message}"
        if self.origin:
            head += f" (at {self.origin})"
        if self.remediation:
            head += f"\n  hint: {self.remediation}"
        return head


class AliascError(Exception):
    def __init__(self, diag: Diagnostic):
        super().__init__(diag.message)
        self.diag = diag

    @classmethod
    def make(cls, code: str, message: str, remediation: str = "", origin: Optional[str] = None):
        return cls(Diagnostic(code=code, message=message, remediation=remediation, origin=origin))


class ConfigError(AliascError):
    pass


class ScriptExistsError(AliascError):
    pass


class ExecutableNotFoundError(AliascError):
    pass


class PrinterError(AliascError):
    pass


class ScriptNotFoundError(AliascError):
    pass


class ScriptFailedError(AliascError):
    pass


class TemplateError(AliascError):
    pass
