"""
Centralized file I/O utilities.

- Single place for encoding handling
- Use Path.read_text()/write_text() consistently (no raw open/read)
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING
from ..shared.errors import InputError, OutputError


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    try:
        return p.read_text(encoding=DEFAULT_FILE_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"failed to read input: {e}", p) from e


def write_output_file(path: Union[Path, str], contents: str) -> None:
    """Write a generated file, creating parent directories."""
    p = Path(path) if not isinstance(path, Path) else path
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(contents, encoding=DEFAULT_FILE_ENCODING)
    except OSError as e:
        raise OutputError(f"failed to write output: {e}", p) from e
