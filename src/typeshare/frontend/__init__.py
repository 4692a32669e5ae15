"""
Rust frontend: grammar, parser and syntax tree.

Lowering to IR lives in `typeshare.frontend.lowering` and is imported from
there directly.
"""

from .parser import Parser, default_parser
from .syntax import SourceFile, SyntaxVisitor

__all__ = ["Parser", "default_parser", "SourceFile", "SyntaxVisitor"]
