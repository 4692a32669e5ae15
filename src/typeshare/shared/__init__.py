"""
Shared components: source locations and the error taxonomy.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic,
    format_diagnostic,
    TypeshareError,
    InputError,
    ParseError,
    LoweringError,
    OutputError,
    RustTypeFormatError,
)

__all__ = [
    "SourceLocation",
    "Diagnostic",
    "format_diagnostic",
    "TypeshareError",
    "InputError",
    "ParseError",
    "LoweringError",
    "OutputError",
    "RustTypeFormatError",
]
