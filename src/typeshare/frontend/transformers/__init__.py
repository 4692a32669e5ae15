"""
Rust Syntax Transformers
========================

Lark parse tree -> syntax tree conversion, plus the token-tree helpers used
for attributes and opaque items.
"""

from .base import RustTransformer
from .literals import LiteralParser
from .meta import MetaParser, extract_paths, flatten_tokens

__all__ = [
    'RustTransformer',
    'LiteralParser',
    'MetaParser',
    'extract_paths',
    'flatten_tokens',
]
