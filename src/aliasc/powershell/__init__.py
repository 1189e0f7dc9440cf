__all__ = ['format_powershell', 'PowerShellTarget']

from .printer import format_powershell
from .target import PowerShellTarget
