"""
IR Nodes

Rust Pattern: typeshare_core::rust_types / typeshare_core::parser::ParsedData

Language-agnostic description of the declarations found in one crate.
Backends render from these nodes alone and never look at the Rust syntax
tree again.

Variant and enum shapes are closed sets. Code that dispatches on them
checks every kind with isinstance and raises on anything else, so adding a
kind shows up as a failure in every backend.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .types import RustType


@dataclass(frozen=True)
class Id:
    """
    Identifier pair.

    `original` is the name as written in Rust (used for matching and for
    synthesized names); `renamed` is the serialized name seen on the wire.
    Both are always populated.
    """
    original: str
    renamed: str

    @classmethod
    def same(cls, name: str) -> "Id":
        return cls(original=name, renamed=name)


@dataclass
class RustField:
    id: Id
    ty: RustType
    comments: List[str] = field(default_factory=list)
    has_default: bool = False
    type_overrides: Dict[str, str] = field(default_factory=dict)

    def type_override(self, language: str) -> Optional[str]:
        return self.type_overrides.get(language)


@dataclass
class RustStruct:
    id: Id
    generic_types: List[str] = field(default_factory=list)
    fields: List[RustField] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


@dataclass
class RustTypeAlias:
    id: Id
    ty: RustType
    generic_types: List[str] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


# ============================================================================
# Enums
# ============================================================================

@dataclass
class VariantShared:
    id: Id
    comments: List[str] = field(default_factory=list)


class RustEnumVariant:
    """Base for the three variant kinds."""
    shared: VariantShared


@dataclass
class UnitVariant(RustEnumVariant):
    shared: VariantShared


@dataclass
class TupleVariant(RustEnumVariant):
    shared: VariantShared
    ty: RustType


@dataclass
class AnonymousStructVariant(RustEnumVariant):
    shared: VariantShared
    fields: List[RustField] = field(default_factory=list)


@dataclass
class EnumShared:
    id: Id
    generic_types: List[str] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    variants: List[RustEnumVariant] = field(default_factory=list)


class RustEnum:
    """Base for unit-only and algebraic enums."""
    shared: EnumShared


@dataclass
class UnitEnum(RustEnum):
    """Every variant is payload-free and maps to a distinct wire string."""
    shared: EnumShared


@dataclass
class AlgebraicEnum(RustEnum):
    """
    Adjacently tagged enum: `tag_key` holds the variant name, `content_key`
    holds the payload.
    """
    shared: EnumShared
    tag_key: str
    content_key: str


# ============================================================================
# Per-crate model
# ============================================================================

@dataclass(frozen=True)
class ImportedType:
    """A type referenced from another crate, as found by the import visitor."""
    base_crate: str
    type_name: str


@dataclass
class ErrorInfo:
    """A `#[typeshare]` item that could not be lowered."""
    crate_name: str
    file_name: str
    type_name: str
    error: str

    def __str__(self) -> str:
        return f"{self.file_name}: `{self.type_name}`: {self.error}"


@dataclass
class ParsedData:
    """
    Everything typeshare extracted from one file, or, after merging, from
    one crate.

    Merging appends sequences and unions sets. Only the set projections are
    order independent; consumers that need stable output sort declarations
    themselves.
    """
    crate_name: str
    file_name: str = ""
    structs: List[RustStruct] = field(default_factory=list)
    enums: List[RustEnum] = field(default_factory=list)
    aliases: List[RustTypeAlias] = field(default_factory=list)
    errors: List[ErrorInfo] = field(default_factory=list)
    import_types: Set[ImportedType] = field(default_factory=set)
    type_names: Set[str] = field(default_factory=set)
    multi_file: bool = False

    def add(self, other: "ParsedData") -> None:
        """Merge another file's results for the same crate into this one."""
        self.structs.extend(other.structs)
        self.enums.extend(other.enums)
        self.aliases.extend(other.aliases)
        self.errors.extend(other.errors)
        self.import_types |= other.import_types
        self.type_names |= other.type_names
        if not self.file_name:
            self.file_name = other.file_name

    def push_struct(self, rs: RustStruct) -> None:
        self.type_names.add(rs.id.original)
        self.structs.append(rs)

    def push_enum(self, e: RustEnum) -> None:
        self.type_names.add(e.shared.id.original)
        self.enums.append(e)

    def push_alias(self, alias: RustTypeAlias) -> None:
        self.type_names.add(alias.id.original)
        self.aliases.append(alias)

    def is_empty(self) -> bool:
        """True when the file contributed no typeshared declarations."""
        return not (self.enums or self.aliases or self.structs or self.errors)
