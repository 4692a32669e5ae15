"""
Swift Backend

Rust Pattern: typeshare_core::language::Swift

Generates `Codable` value types:

- structs        -> `public struct` with a memberwise `init`, plus
                    `CodingKeys` when a wire name is not a Swift identifier
- unit enums     -> `public enum Name: String, Codable`
- algebraic enum -> `public enum` with associated values and hand-written
                    `init(from:)` / `encode(to:)` for adjacent tagging;
                    anonymous struct variants are hoisted into
                    `<Enum><Variant>Inner`
- type aliases   -> `public typealias`

Swift has no package concept. Imports name modules, one per crate.
"""

from typing import List, Sequence, TextIO

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
from ..utils.rename import remove_dash_from_identifier, to_camel_case, to_pascal_case
from .base import Language, SupportedLanguage, quote, version_banner

CODABLE_VOID = "CodableVoid"

SWIFT_TYPES = {
    SpecialKind.UNIT: CODABLE_VOID,
    SpecialKind.STRING: "String",
    SpecialKind.CHAR: "Unicode.Scalar",
    SpecialKind.I8: "Int8",
    SpecialKind.I16: "Int16",
    SpecialKind.I32: "Int32",
    SpecialKind.I54: "Int64",
    SpecialKind.I64: "Int64",
    SpecialKind.ISIZE: "Int",
    SpecialKind.U8: "UInt8",
    SpecialKind.U16: "UInt16",
    SpecialKind.U32: "UInt32",
    SpecialKind.U53: "UInt64",
    SpecialKind.U64: "UInt64",
    SpecialKind.USIZE: "UInt",
    SpecialKind.BOOL: "Bool",
    SpecialKind.F32: "Float",
    SpecialKind.F64: "Double",
}


class Swift(Language):
    language = SupportedLanguage.SWIFT

    def __init__(self, config=None):
        super().__init__(config)
        self.uses_codable_void = False

    def format_special_type(self, special: SpecialType, generic_types: Sequence[str]) -> str:
        kind = special.kind
        if special.is_list():
            return f"[{self.format_type(special.parameters[0], generic_types)}]"
        if kind is SpecialKind.OPTION:
            return f"{self.format_type(special.parameters[0], generic_types)}?"
        if kind is SpecialKind.HASH_MAP:
            key, value = special.parameters
            return f"[{self.format_type(key, generic_types)}: {self.format_type(value, generic_types)}]"
        if kind is SpecialKind.UNIT:
            self.uses_codable_void = True
        if kind in SWIFT_TYPES:
            return SWIFT_TYPES[kind]
        raise ValueError(f"unknown special type: {kind}")

    def begin_file(self, w: TextIO, data: ParsedData) -> None:
        if not self.config.no_version_header:
            w.write(f"/*\n {version_banner()}\n */\n\n")
        w.write("import Foundation\n\n")

    def write_imports(self, w: TextIO, imports: ScopedCrateTypes) -> None:
        if not imports:
            return
        for crate_name in imports:
            w.write(f"import {to_pascal_case(crate_name)}\n")
        w.write("\n")

    def end_file(self, w: TextIO) -> None:
        if self.uses_codable_void:
            w.write("/// () isn't codable, so we use this instead to represent Rust's unit type\n")
            w.write(f"public struct {CODABLE_VOID}: Codable, Equatable {{}}\n")

    def write_type_alias(self, w: TextIO, alias: RustTypeAlias) -> None:
        self.write_comments(w, 0, alias.comments)
        w.write(
            f"public typealias {self.prefix}{alias.id.original}{self.generic_parameters(alias.generic_types)} = "
            f"{self.format_type(alias.ty, alias.generic_types)}\n\n"
        )

    def write_struct(self, w: TextIO, rs: RustStruct) -> None:
        self.write_comments(w, 0, rs.comments)
        name = f"{self.prefix}{rs.id.renamed}{self.codable_generics(rs.generic_types)}"

        if not rs.fields:
            w.write(f"public struct {name}: Codable {{\n\tpublic init() {{}}\n}}\n\n")
            return

        w.write(f"public struct {name}: Codable {{\n")
        members = []
        for f in rs.fields:
            self.write_comments(w, 1, f.comments)
            member = f"{remove_dash_from_identifier(f.id.renamed)}: {self.field_type(f, rs.generic_types)}"
            members.append((remove_dash_from_identifier(f.id.renamed), member))
            w.write(f"\tpublic let {member}\n")

        coding_keys = self.coding_keys(rs.fields)
        if coding_keys:
            w.write("\n\tenum CodingKeys: String, CodingKey, Codable {\n")
            separator = ",\n\t\t\t"
            w.write(f"\t\tcase {separator.join(coding_keys)}\n")
            w.write("\t}\n")

        w.write(f"\n\tpublic init({', '.join(m for _, m in members)}) {{\n")
        for ident, _ in members:
            w.write(f"\t\tself.{ident} = {ident}\n")
        w.write("\t}\n}\n\n")

    def field_type(self, f: RustField, generic_types: Sequence[str]) -> str:
        ty = f.type_override(self.language.value)
        if ty is None:
            ty = self.format_type(f.ty, generic_types)
        if f.has_default and not f.ty.is_optional():
            ty = f"{ty}?"
        return ty

    @staticmethod
    def coding_keys(fields: Sequence[RustField]) -> List[str]:
        if not any("-" in f.id.renamed for f in fields):
            return []
        keys = []
        for f in fields:
            ident = remove_dash_from_identifier(f.id.renamed)
            keys.append(ident if ident == f.id.renamed else f"{ident} = {quote(f.id.renamed)}")
        return keys

    def write_enum(self, w: TextIO, e: RustEnum) -> None:
        self.write_types_for_anonymous_structs(w, e, lambda variant: self.anonymous_struct_name(e, variant))

        self.write_comments(w, 0, e.shared.comments)
        name = f"{self.prefix}{e.shared.id.renamed}"
        generics = self.codable_generics(e.shared.generic_types)

        if isinstance(e, UnitEnum):
            w.write(f"public enum {name}{generics}: String, Codable {{\n")
            for v in e.shared.variants:
                self.write_comments(w, 1, v.shared.comments)
                case = to_camel_case(v.shared.id.original)
                raw = "" if case == v.shared.id.renamed else f" = {quote(v.shared.id.renamed)}"
                w.write(f"\tcase {case}{raw}\n")
            w.write("}\n\n")
        elif isinstance(e, AlgebraicEnum):
            w.write(f"public enum {name}{generics}: Codable {{\n")
            self.write_algebraic_cases(w, e)
            w.write("\n")
            self.write_algebraic_coding(w, e, name)
            w.write("}\n\n")
        else:
            raise ValueError(f"unknown enum: {e.__class__.__name__}")

    def variant_payload(self, e: AlgebraicEnum, v) -> str:
        """Associated value type of a variant, or "" for a unit variant."""
        if isinstance(v, UnitVariant):
            return ""
        if isinstance(v, TupleVariant):
            return self.format_type(v.ty, e.shared.generic_types)
        if isinstance(v, AnonymousStructVariant):
            inner = self.anonymous_struct_name(e, v.shared.id.original)
            return f"{self.prefix}{inner}{self.generic_parameters(self.anonymous_struct_generics(e, v.fields))}"
        raise ValueError(f"unknown variant: {v.__class__.__name__}")

    def write_algebraic_cases(self, w: TextIO, e: AlgebraicEnum) -> None:
        for v in e.shared.variants:
            self.write_comments(w, 1, v.shared.comments)
            payload = self.variant_payload(e, v)
            case = to_camel_case(v.shared.id.original)
            w.write(f"\tcase {case}({payload})\n" if payload else f"\tcase {case}\n")

    def write_algebraic_coding(self, w: TextIO, e: AlgebraicEnum, name: str) -> None:
        tag, content = e.tag_key, e.content_key
        w.write("\tenum CodingKeys: String, CodingKey, Codable {\n")
        w.write(f"\t\tcase {tag}, {content}\n")
        w.write("\t}\n\n")

        w.write("\tpublic init(from decoder: Decoder) throws {\n")
        w.write("\t\tlet container = try decoder.container(keyedBy: CodingKeys.self)\n")
        w.write(f"\t\tif let type = try? container.decode(String.self, forKey: .{tag}) {{\n")
        w.write("\t\t\tswitch type {\n")
        for v in e.shared.variants:
            case = to_camel_case(v.shared.id.original)
            payload = self.variant_payload(e, v)
            w.write(f"\t\t\tcase {quote(v.shared.id.renamed)}:\n")
            if payload:
                w.write(f"\t\t\t\tif let content = try? container.decode({payload}.self, forKey: .{content}) {{\n")
                w.write(f"\t\t\t\t\tself = .{case}(content)\n")
                w.write("\t\t\t\t\treturn\n")
                w.write("\t\t\t\t}\n")
            else:
                w.write(f"\t\t\t\tself = .{case}\n")
                w.write("\t\t\t\treturn\n")
        w.write("\t\t\tdefault:\n")
        w.write("\t\t\t\tbreak\n")
        w.write("\t\t\t}\n")
        w.write("\t\t}\n")
        w.write(
            f"\t\tthrow DecodingError.typeMismatch({name}.self, DecodingError.Context("
            f"codingPath: decoder.codingPath, debugDescription: \"Wrong type for {name}\"))\n"
        )
        w.write("\t}\n\n")

        w.write("\tpublic func encode(to encoder: Encoder) throws {\n")
        w.write("\t\tvar container = encoder.container(keyedBy: CodingKeys.self)\n")
        w.write("\t\tswitch self {\n")
        for v in e.shared.variants:
            case = to_camel_case(v.shared.id.original)
            if self.variant_payload(e, v):
                w.write(f"\t\tcase .{case}(let content):\n")
                w.write(f"\t\t\ttry container.encode({quote(v.shared.id.renamed)}, forKey: .{tag})\n")
                w.write(f"\t\t\ttry container.encode(content, forKey: .{content})\n")
            else:
                w.write(f"\t\tcase .{case}:\n")
                w.write(f"\t\t\ttry container.encode({quote(v.shared.id.renamed)}, forKey: .{tag})\n")
        w.write("\t\t}\n")
        w.write("\t}\n")

    @staticmethod
    def codable_generics(generic_types: Sequence[str]) -> str:
        if not generic_types:
            return ""
        return f"<{', '.join(f'{g}: Codable' for g in generic_types)}>"

    @staticmethod
    def write_comments(w: TextIO, indent: int, comments: Sequence[str]) -> None:
        tabs = "\t" * indent
        for comment in comments:
            w.write(f"{tabs}/// {comment}\n")
