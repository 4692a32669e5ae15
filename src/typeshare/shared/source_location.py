"""
Source Location (Span)

Rust Pattern: proc_macro2::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Position of a diagnostic inside a Rust source file.

    Immutable (frozen) for hashability. Lines and columns are 1-based,
    0 means unknown.
    """
    file: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column (rustc pattern)"""
        if not self.line:
            return self.file
        return f"{self.file}:{self.line}:{self.column}"
