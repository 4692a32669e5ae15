"""
typeshare utilities package
"""

from .io_utils import read_source_file, write_output_file
from .rename import apply_rename_rule, remove_dash_from_identifier

__all__ = [
    "read_source_file",
    "write_output_file",
    "apply_rename_rule",
    "remove_dash_from_identifier",
]
