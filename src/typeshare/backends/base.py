"""
Backend Interface

Rust Pattern: typeshare_core::language::Language

A backend turns one crate's ParsedData into the text of one generated file.
Concrete backends implement the formatter and writer hooks; the shared
algorithms here (type dispatch, declaration ordering, anonymous struct
hoisting, error wrapping) are the same for every target.

Backends are cheap and hold per-render state, so every render gets a fresh
instance from `create_backend`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Mapping, Optional, Sequence, TextIO, Tuple, Union

from ..analysis.crate_types import ScopedCrateTypes
from ..ir.nodes import (
    AnonymousStructVariant,
    Id,
    ParsedData,
    RustEnum,
    RustField,
    RustStruct,
    RustTypeAlias,
)
from ..ir.types import GenericType, RustType, SimpleType, SpecialType
from ..shared.errors import LoweringError, RustTypeFormatError
from ..utils.config import TYPESHARE_VERSION


class SupportedLanguage(Enum):
    KOTLIN = "kotlin"
    SWIFT = "swift"
    TYPESCRIPT = "typescript"

    def language_extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    SupportedLanguage.KOTLIN: "kt",
    SupportedLanguage.SWIFT: "swift",
    SupportedLanguage.TYPESCRIPT: "ts",
}


@dataclass(frozen=True)
class BackendConfig:
    """
    Per-run backend settings.

    package:           namespace for generated code (Kotlin package)
    prefix:            prepended to every user-defined type name
    type_mappings:     Rust type name -> target type name, checked first
    no_version_header: omit the "Generated by typeshare" banner
    """
    package: str = ""
    prefix: str = ""
    type_mappings: Mapping[str, str] = field(default_factory=dict)
    no_version_header: bool = False


Declaration = Union[RustTypeAlias, RustStruct, RustEnum]


def declaration_name(decl: Declaration) -> str:
    if isinstance(decl, RustEnum):
        return decl.shared.id.original
    return decl.id.original


def version_banner() -> str:
    return f"Generated by typeshare {TYPESHARE_VERSION}"


class Language(ABC):
    """
    Code generation contract.

    Usage:
        backend = create_backend(SupportedLanguage.KOTLIN, config)
        out = io.StringIO()
        backend.generate_types(out, imports, parsed_data)
    """

    language: SupportedLanguage

    def __init__(self, config: Optional[BackendConfig] = None):
        self.config = config or BackendConfig()

    @property
    def package(self) -> str:
        return self.config.package

    @property
    def prefix(self) -> str:
        return self.config.prefix

    @property
    def type_mappings(self) -> Mapping[str, str]:
        return self.config.type_mappings

    # =========================================================================
    # Shared algorithms
    # =========================================================================

    def generate_types(self, w: TextIO, imports: ScopedCrateTypes, data: ParsedData) -> None:
        """
        Write a complete file for one crate: header, imports, every
        declaration sorted by name, footer.

        A formatter failure is re-raised as LoweringError naming the crate
        and the declaration being written.
        """
        self.begin_file(w, data)
        if data.multi_file:
            self.write_imports(w, imports)

        for decl in self.ordered_declarations(data):
            try:
                if isinstance(decl, RustTypeAlias):
                    self.write_type_alias(w, decl)
                elif isinstance(decl, RustStruct):
                    self.write_struct(w, decl)
                elif isinstance(decl, RustEnum):
                    self.write_enum(w, decl)
                else:
                    raise ValueError(f"unknown declaration: {decl.__class__.__name__}")
            except RustTypeFormatError as e:
                raise LoweringError(e.message, data.crate_name, declaration_name(decl)) from e

        self.end_file(w)

    @staticmethod
    def ordered_declarations(data: ParsedData) -> List[Declaration]:
        decls: List[Declaration] = [*data.aliases, *data.structs, *data.enums]
        return sorted(decls, key=declaration_name)

    def write_types_for_anonymous_structs(
        self,
        w: TextIO,
        e: RustEnum,
        make_struct_name: Callable[[str], str],
    ) -> None:
        """Hoist every anonymous struct variant of `e` into a named struct."""
        for variant in e.shared.variants:
            if not isinstance(variant, AnonymousStructVariant):
                continue
            struct_name = make_struct_name(variant.shared.id.original)
            self.write_struct(w, RustStruct(
                id=Id.same(struct_name),
                generic_types=self.anonymous_struct_generics(e, variant.fields),
                fields=list(variant.fields),
                comments=[
                    f"Generated type representing the anonymous struct variant "
                    f"`{variant.shared.id.original}` of the `{e.shared.id.original}` Rust enum"
                ],
            ))

    @staticmethod
    def anonymous_struct_generics(e: RustEnum, fields: Sequence[RustField]) -> List[str]:
        """Enum generics that occur in `fields`, in enum order, deduplicated."""
        generics: List[str] = []
        for g in e.shared.generic_types:
            if g not in generics and any(f.ty.contains_type(g) for f in fields):
                generics.append(g)
        return generics

    @staticmethod
    def anonymous_struct_name(e: RustEnum, variant_name: str) -> str:
        return f"{e.shared.id.original}{variant_name}Inner"

    # =========================================================================
    # Type formatting
    # =========================================================================

    def format_type(self, ty: RustType, generic_types: Sequence[str]) -> str:
        if isinstance(ty, SimpleType):
            return self.format_simple_type(ty.name, generic_types)
        if isinstance(ty, GenericType):
            return self.format_generic_type(ty.name, ty.parameters, generic_types)
        if isinstance(ty, SpecialType):
            return self.format_special_type(ty, generic_types)
        raise ValueError(f"unknown type: {ty.__class__.__name__}")

    def format_simple_type(self, base: str, generic_types: Sequence[str]) -> str:
        if base in self.type_mappings:
            return self.type_mappings[base]
        if base in generic_types:
            return base
        return f"{self.prefix}{base}"

    def format_generic_type(
        self,
        base: str,
        parameters: Tuple[RustType, ...],
        generic_types: Sequence[str],
    ) -> str:
        return f"{self.format_simple_type(base, generic_types)}{self.format_generic_parameters(parameters, generic_types)}"

    def format_generic_parameters(self, parameters: Tuple[RustType, ...], generic_types: Sequence[str]) -> str:
        return f"<{', '.join(self.format_type(p, generic_types) for p in parameters)}>"

    @abstractmethod
    def format_special_type(self, special: SpecialType, generic_types: Sequence[str]) -> str:
        raise NotImplementedError

    # =========================================================================
    # Writers
    # =========================================================================

    @abstractmethod
    def begin_file(self, w: TextIO, data: ParsedData) -> None:
        raise NotImplementedError

    def end_file(self, w: TextIO) -> None:
        pass

    @abstractmethod
    def write_imports(self, w: TextIO, imports: ScopedCrateTypes) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_type_alias(self, w: TextIO, alias: RustTypeAlias) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_struct(self, w: TextIO, rs: RustStruct) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_enum(self, w: TextIO, e: RustEnum) -> None:
        raise NotImplementedError

    # Helpers shared by the concrete writers

    @staticmethod
    def generic_parameters(generic_types: Sequence[str]) -> str:
        return f"<{', '.join(generic_types)}>" if generic_types else ""


def quote(value: str) -> str:
    """Double-quoted string literal, valid in Kotlin, Swift and TypeScript."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
