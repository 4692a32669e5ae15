"""
Compiler pipeline and driver.
"""

from .driver import GenerationResult, TypeshareDriver
from .pipeline import (
    ParserInput,
    check_parse_errors,
    find_crate_name,
    is_parsed_data_empty,
    merge_mappings,
    output_file_name,
    parse_input,
    parser_inputs,
    walk_source_files,
)

__all__ = [
    "GenerationResult",
    "TypeshareDriver",
    "ParserInput",
    "check_parse_errors",
    "find_crate_name",
    "is_parsed_data_empty",
    "merge_mappings",
    "output_file_name",
    "parse_input",
    "parser_inputs",
    "walk_source_files",
]
