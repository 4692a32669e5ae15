"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic

Every failure in typeshare is fatal for the run. Errors carry enough
context (file, crate, declaration) to locate the cause, and render as
rustc-style diagnostics on the command line.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("TYPESHARE_COLOR", "").lower()
    return explicit not in ("0", "false", "no", "never")


_BOLD = "\033[1m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_CYAN = "\033[36m"
_RESET = "\033[0m"


def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return f"{''.join(codes)}{text}{_RESET}"


@dataclass
class Diagnostic:
    """
    A renderable error.

    Rust Pattern: rustc_errors::Diagnostic
    """
    message: str
    location: Optional[SourceLocation] = None
    notes: List[str] = field(default_factory=list)


def format_diagnostic(
    diagnostic: Diagnostic,
    source_files: Optional[Dict[str, str]] = None,
    color: Optional[bool] = None,
) -> str:
    """
    Render a diagnostic in rustc style.

    Example output (plain, no color)::

        error: unexpected token `}`
         --> src/lib.rs:3:5
          |
        3 |     }
          |     ^
          |
          = note: ...
    """
    color = _use_color() if color is None else color
    out = [
        _style("error", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    ]

    loc = diagnostic.location
    gutter = 1
    if loc is not None:
        source = (source_files or {}).get(loc.file)
        lines = source.split("\n") if source is not None else []
        if loc.line and 0 < loc.line <= len(lines):
            gutter = len(str(loc.line))
            pad = " " * gutter
            out.append(_style(f"{pad}--> ", _BOLD, _BLUE, color=color) + str(loc))
            out.append(_style(f"{pad} |", _BOLD, _BLUE, color=color))
            out.append(_style(f"{loc.line} | ", _BOLD, _BLUE, color=color) + lines[loc.line - 1])
            caret = " " * max(loc.column - 1, 0) + "^"
            out.append(
                _style(f"{pad} | ", _BOLD, _BLUE, color=color)
                + _style(caret, _BOLD, _RED, color=color)
            )
        else:
            out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))

    if diagnostic.notes:
        pad = " " * gutter
        out.append(_style(f"{pad} |", _BOLD, _BLUE, color=color))
        for note in diagnostic.notes:
            out.append(
                _style(f"{pad} = ", _BOLD, _CYAN, color=color)
                + _style("note: ", _BOLD, color=color)
                + note
            )
    return "\n".join(out)


# ============================================================================
# Exception Classes
# ============================================================================

class TypeshareError(Exception):
    """Base exception for all typeshare failures"""

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def notes(self) -> List[str]:
        return []

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(message=self.message, location=self.location, notes=self.notes())

    def __str__(self) -> str:
        if self.location is not None:
            return f"{self.message} ({self.location})"
        return self.message


class InputError(TypeshareError):
    """A source file could not be read."""

    def __init__(self, message: str, path: Union[Path, str]):
        super().__init__(message, SourceLocation(file=str(path)))
        self.path = Path(path)


class ParseError(TypeshareError):
    """
    Malformed Rust source, or `#[typeshare]` items that cannot be lowered.

    `diagnostics` holds one line per rejected item when the error was
    assembled from per-item failures.
    """

    def __init__(
        self,
        message: str,
        source_file: str,
        location: Optional[SourceLocation] = None,
        diagnostics: Sequence[str] = (),
    ):
        super().__init__(message, location or SourceLocation(file=source_file))
        self.source_file = source_file
        self.diagnostics = list(diagnostics)

    def notes(self) -> List[str]:
        return list(self.diagnostics)


class LoweringError(TypeshareError):
    """A backend cannot represent a type used by a declaration."""

    def __init__(self, message: str, crate_name: str, declaration: str):
        super().__init__(f"{message} (in `{declaration}`, crate `{crate_name}`)")
        self.crate_name = crate_name
        self.declaration = declaration


class OutputError(TypeshareError):
    """A generated file could not be written."""

    def __init__(self, message: str, path: Union[Path, str]):
        super().__init__(message, SourceLocation(file=str(path)))
        self.path = Path(path)


class RustTypeFormatError(Exception):
    """
    Raised by backend type formatters for an unsupported construct.

    The code generation loop wraps it into a LoweringError that names the
    declaration being written.
    """

    def __init__(self, message: str, type_name: str = ""):
        super().__init__(message)
        self.message = message
        self.type_name = type_name
