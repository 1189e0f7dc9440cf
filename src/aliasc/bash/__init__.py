__all__ = ['format_bash', 'BashTarget']

from .printer import format_bash
from .target import BashTarget
