"""
Identifier case conversion.

Mirrors serde's `rename_all` rules closely enough that the names written
into generated code match the names serde puts on the wire. Works on both
snake_case field names and PascalCase variant names.
"""

from typing import Callable, Dict, Optional


def to_pascal_case(name: str) -> str:
    """`foo_bar` / `foo-bar` -> `FooBar`. All-caps input (`URL`) is lowercased first."""
    all_upper = name.upper() == name
    out = []
    capitalize = True
    for ch in name:
        if ch in ("_", "-"):
            capitalize = True
        elif capitalize:
            out.append(ch.upper())
            capitalize = False
        else:
            out.append(ch.lower() if all_upper else ch)
    return "".join(out)


def to_camel_case(name: str) -> str:
    pascal = to_pascal_case(name)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]


def to_snake_case(name: str) -> str:
    out = []
    for i, ch in enumerate(name):
        if i > 0 and ch.isupper():
            out.append("_")
        out.append(ch.lower())
    return "".join(out)


def to_screaming_snake_case(name: str) -> str:
    return to_snake_case(name).upper()


def to_kebab_case(name: str) -> str:
    return to_snake_case(name).replace("_", "-")


def to_screaming_kebab_case(name: str) -> str:
    return to_kebab_case(name).upper()


RENAME_RULES: Dict[str, Callable[[str], str]] = {
    "lowercase": str.lower,
    "UPPERCASE": str.upper,
    "PascalCase": to_pascal_case,
    "camelCase": to_camel_case,
    "snake_case": to_snake_case,
    "SCREAMING_SNAKE_CASE": to_screaming_snake_case,
    "kebab-case": to_kebab_case,
    "SCREAMING-KEBAB-CASE": to_screaming_kebab_case,
}


def apply_rename_rule(rule: Optional[str], name: str) -> str:
    """Apply a serde `rename_all` rule. Raises KeyError for unknown rules."""
    if rule is None:
        return name
    return RENAME_RULES[rule](name)


def remove_dash_from_identifier(name: str) -> str:
    # Dashes are legal in wire names but not in target identifiers
    return name.replace("-", "_")
