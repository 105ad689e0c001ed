"""
Custom section stripping.
"""

from .policy import RetentionPolicy, InvalidPatternError
from .stripper import strip_module, strip_module_with_report, StripResult

__all__ = [
    'RetentionPolicy', 'InvalidPatternError',
    'strip_module', 'strip_module_with_report', 'StripResult',
]
