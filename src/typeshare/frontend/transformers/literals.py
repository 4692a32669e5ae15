"""
Literal Parser

Rust Pattern: syn::Lit

Turns literal tokens found inside attributes into Lit values.
"""

import re
from typing import Optional

from lark import Token

from ..syntax import Lit

_ESCAPE = re.compile(r"\\(?:u\{([0-9a-fA-F]{1,6})\}|x([0-9a-fA-F]{2})|\n\s*|(.))", re.DOTALL)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_NUMBER_SUFFIX = re.compile(r"(?:[iu](?:8|16|32|64|128|size)|f32|f64)$")


def unescape(text: str) -> str:
    """Resolve Rust escape sequences in a (non-raw) string or char body."""

    def replace(m: "re.Match[str]") -> str:
        if m.group(1) is not None:
            return chr(int(m.group(1), 16))
        if m.group(2) is not None:
            return chr(int(m.group(2), 16))
        if m.group(3) is None:
            # line continuation
            return ""
        return _SIMPLE_ESCAPES.get(m.group(3), m.group(3))

    return _ESCAPE.sub(replace, text)


class LiteralParser:
    """Dedicated parser for literal tokens"""

    @staticmethod
    def parse(token: Token) -> Optional[Lit]:
        """Parse a literal token; returns None for tokens that are not literals."""
        kind = token.type
        value = str(token)
        if kind == "STRING":
            body = value[2:-1] if value.startswith("b") else value[1:-1]
            return Lit("str", unescape(body))
        if kind == "RAW_STRING":
            body = value[1:] if value.startswith("b") else value
            hashes = len(body) - len(body.lstrip("r#")) - 1
            return Lit("str", body[hashes + 2:len(body) - hashes - 1])
        if kind == "CHAR":
            body = value[2:-1] if value.startswith("b") else value[1:-1]
            return Lit("char", unescape(body))
        if kind == "NUMBER":
            return LiteralParser._parse_number(value)
        if value in ("true", "false"):
            return Lit("bool", value == "true")
        return None

    @staticmethod
    def _parse_number(value: str) -> Lit:
        digits = _NUMBER_SUFFIX.sub("", value).replace("_", "")
        if value.endswith(("f32", "f64")) or (
            not digits.startswith(("0x", "0o", "0b")) and ("." in digits or "e" in digits.lower())
        ):
            return Lit("float", float(digits))
        return Lit("int", int(digits, 0) if digits[:2] in ("0x", "0o", "0b") else int(digits))
