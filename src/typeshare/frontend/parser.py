"""
Parser

Rust Pattern: syn::parse_file

Source text -> syntax tree (frontend/syntax.py) using the Lark LALR grammar
in grammar.lark.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import PARSER_CACHE
from .syntax import SourceFile, TypeNode
from .transformers.base import RustTransformer

logger = logging.getLogger("typeshare.frontend.parser")

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class Parser:
    """
    Rust item parser (Rust naming: syn::parse_file).

    - Takes source text, returns a SourceFile syntax tree
    - Preserves item locations
    - Lark errors become ParseError with file, line and column

    One Parser can be shared between threads: the Lark LALR parser keeps no
    per-parse state and each call builds its own transformer.
    """

    def __init__(self, cache=PARSER_CACHE):
        self.parser = Lark.open(
            str(GRAMMAR_PATH),
            start=["start", "ty"],
            parser="lalr",
            lexer="contextual",
            cache=cache,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, source: str, source_file: str = "lib.rs") -> SourceFile:
        """Parse a whole file."""
        logger.debug(f"parsing {source_file}")
        return self._run(source, source_file, "start")

    def parse_type(self, text: str, source_file: str = "<type>") -> TypeNode:
        """Parse a single type expression, e.g. the target of `serialized_as`."""
        return self._run(text, source_file, "ty")

    def _run(self, source: str, source_file: str, start: str):
        transformer = RustTransformer()
        transformer.current_file = source_file
        try:
            tree = self.parser.parse(mask_block_comments(source), start=start)
            return transformer.transform(tree)
        except UnexpectedInput as e:
            location = SourceLocation(file=source_file, line=getattr(e, "line", 0) or 0,
                                      column=getattr(e, "column", 0) or 0)
            raise ParseError(_describe(e), source_file, location) from e
        except VisitError as e:
            raise ParseError(f"failed to build syntax tree: {e.orig_exc}", source_file) from e


def _describe(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedToken):
        if e.token.type == "$END":
            return "unexpected end of input"
        return f"unexpected token `{e.token}`"
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character `{e.char}`"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    return "syntax error"


@lru_cache(maxsize=None)
def default_parser() -> Parser:
    """Process-wide parser; building the LALR tables is the expensive part."""
    return Parser()


# ============================================================================
# Block comments
# ============================================================================

_RAW_STRING_START = re.compile(r'b?r(#*)"')


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def _block_comment_end(source: str, start: int) -> Optional[int]:
    """End of the (possibly nested) block comment opened at `start`."""
    depth = 0
    i = start
    while i < len(source) - 1:
        if source.startswith("/*", i):
            depth += 1
            i += 2
        elif source.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return None


def _literal_end(source: str, i: int) -> Optional[int]:
    """End of the string, raw string or char literal starting at `i`, if any."""
    c = source[i]
    if c in "br" and (i == 0 or not _is_ident_char(source[i - 1])):
        raw = _RAW_STRING_START.match(source, i)
        if raw is not None:
            close = source.find('"' + raw.group(1), raw.end())
            return len(source) if close < 0 else close + 1 + len(raw.group(1))
        if source.startswith('b"', i) or source.startswith("b'", i):
            return _literal_end(source, i + 1)
    if c == '"':
        j = i + 1
        while j < len(source):
            if source[j] == "\\":
                j += 2
            elif source[j] == '"':
                return j + 1
            else:
                j += 1
        return len(source)
    if c == "'":
        if source.startswith("\\", i + 1):
            close = source.find("'", i + 3)
            return None if close < 0 else close + 1
        if source.startswith("'", i + 2):
            return i + 3
    return None


def _is_outer_block_doc(comment: str) -> bool:
    # `/**/` and `/*** ... */` are plain comments
    return comment.startswith("/**") and len(comment) > 4 and comment[3] not in "*/"


def mask_block_comments(source: str) -> str:
    """
    Blank out block comments, honoring nesting.

    Comment characters other than newlines become spaces, so line and
    column numbers are unchanged. Outer block doc comments (`/** ... */`)
    are kept for the grammar, with any nested delimiters blanked.
    """
    if "/*" not in source:
        return source
    out = []
    i = 0
    n = len(source)
    while i < n:
        if source.startswith("//", i):
            end = source.find("\n", i)
            end = n if end < 0 else end
        elif source.startswith("/*", i):
            end = _block_comment_end(source, i)
            if end is None:
                out.append(source[i:])
                break
            comment = source[i:end]
            if _is_outer_block_doc(comment):
                body = comment[3:-2].replace("/*", "  ").replace("*/", "  ")
                out.append(f"/**{body}*/")
            else:
                out.append(re.sub(r"[^\n]", " ", comment))
            i = end
            continue
        else:
            end = _literal_end(source, i) or i + 1
        out.append(source[i:end])
        i = end
    return "".join(out)
