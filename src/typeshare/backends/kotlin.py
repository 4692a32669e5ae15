"""
Kotlin Backend

Rust Pattern: typeshare_core::language::Kotlin

Generates kotlinx.serialization types:

- structs        -> `@Serializable data class`, or `object` when empty
- unit enums     -> `enum class Name(val string: String)`
- algebraic enum -> `sealed class` with one subclass per variant; anonymous
                    struct variants are hoisted into `<Enum><Variant>Inner`
- type aliases   -> `typealias`

Kotlin's `Char` is 16 bits wide, so Rust `char` maps to `String`.
"""

from typing import Sequence, TextIO

from ..analysis.crate_types import ScopedCrateTypes
from ..ir.nodes import (
    AlgebraicEnum,
    AnonymousStructVariant,
    ParsedData,
    RustEnum,
    RustField,
    RustStruct,
    RustTypeAlias,
    TupleVariant,
    UnitEnum,
    UnitVariant,
)
from ..ir.types import SpecialKind, SpecialType
from ..utils.rename import remove_dash_from_identifier, to_pascal_case
from .base import Language, SupportedLanguage, quote, version_banner

KOTLIN_TYPES = {
    SpecialKind.UNIT: "Unit",
    SpecialKind.STRING: "String",
    SpecialKind.CHAR: "String",
    # https://kotlinlang.org/docs/basic-types.html#integer-types
    SpecialKind.I8: "Byte",
    SpecialKind.I16: "Short",
    SpecialKind.I32: "Int",
    SpecialKind.ISIZE: "Int",
    SpecialKind.I54: "Long",
    SpecialKind.I64: "Long",
    # https://kotlinlang.org/docs/unsigned-integer-types.html
    SpecialKind.U8: "UByte",
    SpecialKind.U16: "UShort",
    SpecialKind.U32: "UInt",
    SpecialKind.USIZE: "UInt",
    SpecialKind.U53: "ULong",
    SpecialKind.U64: "ULong",
    SpecialKind.BOOL: "Boolean",
    SpecialKind.F32: "Float",
    SpecialKind.F64: "Double",
}


class Kotlin(Language):
    language = SupportedLanguage.KOTLIN

    def format_special_type(self, special: SpecialType, generic_types: Sequence[str]) -> str:
        kind = special.kind
        if special.is_list():
            return f"List<{self.format_type(special.parameters[0], generic_types)}>"
        if kind is SpecialKind.OPTION:
            return f"{self.format_type(special.parameters[0], generic_types)}?"
        if kind is SpecialKind.HASH_MAP:
            key, value = special.parameters
            return f"HashMap<{self.format_type(key, generic_types)}, {self.format_type(value, generic_types)}>"
        if kind in KOTLIN_TYPES:
            return KOTLIN_TYPES[kind]
        raise ValueError(f"unknown special type: {kind}")

    def begin_file(self, w: TextIO, data: ParsedData) -> None:
        if not self.package:
            return
        if not self.config.no_version_header:
            w.write(f"/**\n * {version_banner()}\n */\n\n")
        if data.multi_file:
            w.write(f"package {self.package}.{data.crate_name}\n\n")
        else:
            w.write(f"package {self.package}\n\n")
        w.write("import kotlinx.serialization.Serializable\n")
        w.write("import kotlinx.serialization.SerialName\n\n")

    def write_imports(self, w: TextIO, imports: ScopedCrateTypes) -> None:
        for crate_name, type_names in imports.items():
            for type_name in type_names:
                w.write(f"import {self.package}.{crate_name}.{type_name}\n")
        w.write("\n")

    def write_type_alias(self, w: TextIO, alias: RustTypeAlias) -> None:
        self.write_comments(w, 0, alias.comments)
        w.write(
            f"typealias {self.prefix}{alias.id.original}{self.generic_parameters(alias.generic_types)} = "
            f"{self.format_type(alias.ty, alias.generic_types)}\n\n"
        )

    def write_struct(self, w: TextIO, rs: RustStruct) -> None:
        self.write_comments(w, 0, rs.comments)
        w.write("@Serializable\n")

        if not rs.fields:
            w.write(f"object {self.prefix}{rs.id.renamed}\n\n")
            return

        w.write(f"data class {self.prefix}{rs.id.renamed}{self.generic_parameters(rs.generic_types)} (\n")
        # Wire names with dashes cannot be Kotlin identifiers
        requires_serial_name = any("-" in f.id.renamed for f in rs.fields)
        for i, f in enumerate(rs.fields):
            if i:
                w.write(",\n")
            self.write_element(w, f, rs.generic_types, requires_serial_name)
        w.write("\n)\n\n")

    def write_element(
        self,
        w: TextIO,
        f: RustField,
        generic_types: Sequence[str],
        requires_serial_name: bool,
    ) -> None:
        self.write_comments(w, 1, f.comments)
        if requires_serial_name:
            w.write(f"\t@SerialName({quote(f.id.renamed)})\n")

        ty = f.type_override(self.language.value)
        if ty is None:
            ty = self.format_type(f.ty, generic_types)

        if f.ty.is_optional():
            suffix = " = null"
        elif f.has_default:
            suffix = "? = null"
        else:
            suffix = ""
        w.write(f"\tval {remove_dash_from_identifier(f.id.renamed)}: {ty}{suffix}")

    def write_enum(self, w: TextIO, e: RustEnum) -> None:
        self.write_types_for_anonymous_structs(w, e, lambda variant: self.anonymous_struct_name(e, variant))

        self.write_comments(w, 0, e.shared.comments)
        w.write("@Serializable\n")

        generics = self.generic_parameters(e.shared.generic_types)
        if isinstance(e, UnitEnum):
            w.write(f"enum class {self.prefix}{e.shared.id.renamed}{generics}(val string: String) {{\n")
        elif isinstance(e, AlgebraicEnum):
            w.write(f"sealed class {self.prefix}{e.shared.id.renamed}{generics} {{\n")
        else:
            raise ValueError(f"unknown enum: {e.__class__.__name__}")

        self.write_enum_variants(w, e)
        w.write("}\n\n")

    def write_enum_variants(self, w: TextIO, e: RustEnum) -> None:
        if isinstance(e, UnitEnum):
            for v in e.shared.variants:
                self.write_comments(w, 1, v.shared.comments)
                w.write(f"\t@SerialName({quote(v.shared.id.renamed)})\n")
                w.write(f"\t{v.shared.id.original}({quote(v.shared.id.renamed)}),\n")
            return

        generics = self.generic_parameters(e.shared.generic_types)
        for v in e.shared.variants:
            self.write_comments(w, 1, v.shared.comments)
            w.write("\t@Serializable\n")
            w.write(f"\t@SerialName({quote(v.shared.id.renamed)})\n")

            variant_name = to_pascal_case(v.shared.id.original)
            if variant_name[:1].isdigit():
                variant_name = f"_{variant_name}"

            if isinstance(v, UnitVariant):
                w.write(f"\tobject {variant_name}")
            elif isinstance(v, TupleVariant):
                w.write(
                    f"\tdata class {variant_name}{generics}("
                    f"val {e.content_key}: {self.format_type(v.ty, e.shared.generic_types)})"
                )
            elif isinstance(v, AnonymousStructVariant):
                inner = self.anonymous_struct_name(e, v.shared.id.original)
                inner_generics = self.generic_parameters(self.anonymous_struct_generics(e, v.fields))
                w.write(
                    f"\tdata class {variant_name}{generics}("
                    f"val {e.content_key}: {self.prefix}{inner}{inner_generics})"
                )
            else:
                raise ValueError(f"unknown variant: {v.__class__.__name__}")

            w.write(f": {self.prefix}{e.shared.id.renamed}{generics}()\n")

    @staticmethod
    def write_comments(w: TextIO, indent: int, comments: Sequence[str]) -> None:
        tabs = "\t" * indent
        for comment in comments:
            w.write(f"{tabs}/// {comment}\n")
