__all__ = [
    'AliascError', 'ConfigError', 'Diagnostic',
    'Command', 'Flag', 'MatchCase', 'Workspace', 'load_workspace', 'parse_workspace',
    'ScriptBuilder', 'RESOLVERS',
]

__version__ = "0.1.0"

from .diagnostics import AliascError, ConfigError, Diagnostic
from .config import Command, Flag, MatchCase, Workspace, load_workspace, parse_workspace
from .builder import ScriptBuilder
from .resolver import RESOLVERS
