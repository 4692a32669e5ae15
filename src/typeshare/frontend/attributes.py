"""
Attribute Helpers

Rust Pattern: typeshare_core::parser attribute helpers

Queries over `#[serde(...)]` and `#[typeshare(...)]` attributes. Each helper
takes the attribute list of one item, field or variant.
"""

from typing import Dict, Iterator, Optional, Sequence, Union

from ..utils.config import TYPESHARE_ATTRIBUTE
from .syntax import Attribute, Lit, Meta, MetaList, MetaNameValue, MetaPath

SERDE_ATTRIBUTE = "serde"

# Keys inside #[typeshare(...)] that are options rather than language overrides
TYPESHARE_OPTIONS = frozenset({"serialized_as", "skip", "redacted"})


def has_typeshare(attrs: Sequence[Attribute]) -> bool:
    """`#[typeshare]`, `#[typeshare(...)]` or `#[typeshare::typeshare]`."""
    return any(attr.path.last == TYPESHARE_ATTRIBUTE for attr in attrs if not attr.inner)


def _nested(attrs: Sequence[Attribute], name: str) -> Iterator[Union[Meta, Lit]]:
    for attr in attrs:
        if isinstance(attr.meta, MetaList) and attr.meta.path.last == name:
            yield from attr.meta.nested


def _value(attrs: Sequence[Attribute], group: str, key: str) -> Optional[str]:
    for item in _nested(attrs, group):
        if (
            isinstance(item, MetaNameValue)
            and item.path.is_ident(key)
            and item.value is not None
            and item.value.kind == "str"
        ):
            return item.value.value
    return None


def _flag(attrs: Sequence[Attribute], group: str, key: str) -> bool:
    for item in _nested(attrs, group):
        if isinstance(item, (MetaPath, MetaNameValue, MetaList)) and item.path.is_ident(key):
            return True
    return False


def serde_value(attrs: Sequence[Attribute], key: str) -> Optional[str]:
    """`#[serde(key = "value")]` -> "value"."""
    return _value(attrs, SERDE_ATTRIBUTE, key)


def serde_flag(attrs: Sequence[Attribute], key: str) -> bool:
    """True for `#[serde(key)]` and also for `#[serde(key = ...)]`."""
    return _flag(attrs, SERDE_ATTRIBUTE, key)


def serde_rename(attrs: Sequence[Attribute]) -> Optional[str]:
    """
    Serialized name from `rename = "x"` or `rename(serialize = "x")`.
    """
    value = serde_value(attrs, "rename")
    if value is not None:
        return value
    for item in _nested(attrs, SERDE_ATTRIBUTE):
        if isinstance(item, MetaList) and item.path.is_ident("rename"):
            for inner in item.nested:
                if (
                    isinstance(inner, MetaNameValue)
                    and inner.path.is_ident("serialize")
                    and inner.value is not None
                ):
                    return inner.value.value
    return None


def typeshare_value(attrs: Sequence[Attribute], key: str) -> Optional[str]:
    return _value(attrs, TYPESHARE_ATTRIBUTE, key)


def typeshare_flag(attrs: Sequence[Attribute], key: str) -> bool:
    return _flag(attrs, TYPESHARE_ATTRIBUTE, key)


def is_skipped(attrs: Sequence[Attribute]) -> bool:
    """`#[serde(skip)]` or `#[typeshare(skip)]`."""
    return serde_flag(attrs, "skip") or typeshare_flag(attrs, "skip")


def type_overrides(attrs: Sequence[Attribute]) -> Dict[str, str]:
    """
    Per-language type overrides.

    Accepts both spellings::

        #[typeshare(kotlin = "Int")]
        #[typeshare(kotlin(type = "Int"))]
    """
    overrides: Dict[str, str] = {}
    for item in _nested(attrs, TYPESHARE_ATTRIBUTE):
        if not isinstance(item, (MetaNameValue, MetaList)) or len(item.path.segments) != 1:
            continue
        language = item.path.last
        if language in TYPESHARE_OPTIONS:
            continue
        if isinstance(item, MetaNameValue):
            if item.value is not None and item.value.kind == "str":
                overrides[language] = item.value.value
            continue
        for inner in item.nested:
            if (
                isinstance(inner, MetaNameValue)
                and inner.path.is_ident("type")
                and inner.value is not None
                and inner.value.kind == "str"
            ):
                overrides[language] = inner.value.value
    return overrides

