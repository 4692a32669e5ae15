"""
Token Tree Helpers

Rust Pattern: syn::Attribute::parse_meta / proc_macro2::TokenStream

Attributes and non-declaration items are parsed as flat token trees. This
module recovers structure from them on demand: meta items for attributes,
qualified paths for everything else.
"""

import re
from typing import List, Optional, Sequence, Union

from lark import Token

from ..syntax import Lit, Meta, MetaList, MetaNameValue, MetaPath, Path, PathSegment
from .literals import LiteralParser

_IDENT = re.compile(r"^(?:r#)?[A-Za-z_][A-Za-z0-9_]*$")

_OPEN = {"(": ")", "[": "]", "{": "}"}
_CLOSE = {")", "]", "}"}


def flatten_tokens(*parts) -> List[Token]:
    """Flatten nested lists of tokens produced by token-tree rules."""
    out: List[Token] = []
    for part in parts:
        if isinstance(part, Token):
            out.append(part)
        elif isinstance(part, (list, tuple)):
            out.extend(flatten_tokens(*part))
    return out


def is_ident(token: Token) -> bool:
    return bool(_IDENT.match(str(token)))


def ident_text(token: Token) -> str:
    text = str(token)
    return text[2:] if text.startswith("r#") else text


def extract_paths(tokens: Sequence[Token]) -> List[Path]:
    """
    Find every multi-segment path (`a::b::C`) in a flat token sequence.

    A path stops at the first token that is not `::` followed by an
    identifier, so `Vec::<T>::new` yields `Vec`. Leading `::` is kept.
    """
    paths: List[Path] = []
    i = 0
    n = len(tokens)
    while i < n:
        leading = False
        start = i
        if tokens[i] == "::" and i + 1 < n and is_ident(tokens[i + 1]):
            if i > 0 and is_ident(tokens[i - 1]):
                i += 1
                continue
            leading = True
            start = i + 1
        if not is_ident(tokens[start]):
            i += 1
            continue
        idents = [ident_text(tokens[start])]
        j = start + 1
        while j + 1 < n and tokens[j] == "::" and is_ident(tokens[j + 1]):
            idents.append(ident_text(tokens[j + 1]))
            j += 2
        if len(idents) > 1:
            paths.append(Path([PathSegment(s) for s in idents], leading_colon=leading))
        i = j
    return paths


class MetaParser:
    """
    Recursive-descent parser from attribute tokens to meta items.

    Grammar::

        meta   := path [ "=" lit | "(" nested ")" ]
        nested := [ (meta | lit) ("," (meta | lit))* ","? ]

    Anything else is rejected by returning None.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    @classmethod
    def parse_attribute(cls, path: Path, input_kind: Optional[str], tokens: Sequence[Token]) -> Optional[Meta]:
        """Build the meta item of `#[path ...]` from its input tokens."""
        if input_kind is None:
            return MetaPath(path)
        if input_kind == "=":
            value = LiteralParser.parse(tokens[0]) if len(tokens) == 1 else None
            return MetaNameValue(path, value)
        if input_kind != "(":
            return None
        nested = cls(tokens).parse_nested()
        if nested is None:
            return None
        return MetaList(path, nested)

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def parse_nested(self) -> Optional[List[Union[Meta, Lit]]]:
        items: List[Union[Meta, Lit]] = []
        while not self._at_end():
            item = self._parse_item()
            if item is None:
                return None
            items.append(item)
            if self._at_end():
                break
            if self._peek() != ",":
                return None
            self.pos += 1
        return items

    def _parse_item(self) -> Optional[Union[Meta, Lit]]:
        tok = self._peek()
        lit = LiteralParser.parse(tok)
        if lit is not None:
            self.pos += 1
            return lit
        path = self._parse_path()
        if path is None:
            return None
        nxt = self._peek()
        if nxt is None or nxt == ",":
            return MetaPath(path)
        if nxt == "=":
            self.pos += 1
            value_tok = self._peek()
            value = LiteralParser.parse(value_tok) if value_tok is not None else None
            if value is None:
                return None
            self.pos += 1
            return MetaNameValue(path, value)
        if nxt == "(":
            inner = self._take_group()
            if inner is None:
                return None
            nested = MetaParser(inner).parse_nested()
            if nested is None:
                return None
            return MetaList(path, nested)
        return None

    def _parse_path(self) -> Optional[Path]:
        leading = False
        if self._peek() == "::":
            leading = True
            self.pos += 1
        tok = self._peek()
        if tok is None or not is_ident(tok):
            return None
        segments = [PathSegment(ident_text(tok))]
        self.pos += 1
        while (
            self._peek() == "::"
            and self.pos + 1 < len(self.tokens)
            and is_ident(self.tokens[self.pos + 1])
        ):
            segments.append(PathSegment(ident_text(self.tokens[self.pos + 1])))
            self.pos += 2
        return Path(segments, leading_colon=leading)

    def _take_group(self) -> Optional[List[Token]]:
        """Consume a balanced `( ... )` group and return its inner tokens."""
        depth = 0
        start = self.pos
        while not self._at_end():
            tok = self.tokens[self.pos]
            self.pos += 1
            if tok in _OPEN:
                depth += 1
            elif tok in _CLOSE:
                depth -= 1
                if depth == 0:
                    return self.tokens[start + 1:self.pos - 1]
        return None
