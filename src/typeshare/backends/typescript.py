"""
TypeScript Backend

Rust Pattern: typeshare_core::language::TypeScript

Generates declaration-only TypeScript:

- structs        -> `export interface`
- unit enums     -> `export enum` with string values
- algebraic enum -> `export type` discriminated union on the tag key
- type aliases   -> `export type`

Anonymous struct variants are not hoisted into `<Enum><Variant>Inner`
types as in Kotlin and Swift. An object literal type is valid inside a
union arm, so their fields are written inline and no helper name is added
to the generated module.

`number` is an IEEE double, so 64-bit and pointer-sized integers are
rejected. The JSON-safe I54/U53 kinds map to `number`.
"""

import io
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
from ..shared.errors import RustTypeFormatError
from .base import Language, SupportedLanguage, quote, version_banner

TYPESCRIPT_TYPES = {
    SpecialKind.UNIT: "undefined",
    SpecialKind.STRING: "string",
    SpecialKind.CHAR: "string",
    SpecialKind.I8: "number",
    SpecialKind.I16: "number",
    SpecialKind.I32: "number",
    SpecialKind.I54: "number",
    SpecialKind.U8: "number",
    SpecialKind.U16: "number",
    SpecialKind.U32: "number",
    SpecialKind.U53: "number",
    SpecialKind.BOOL: "boolean",
    SpecialKind.F32: "number",
    SpecialKind.F64: "number",
}

UNREPRESENTABLE = frozenset({SpecialKind.I64, SpecialKind.U64, SpecialKind.ISIZE, SpecialKind.USIZE})


def property_name(name: str) -> str:
    return quote(name) if "-" in name else name


class TypeScript(Language):
    language = SupportedLanguage.TYPESCRIPT

    def format_special_type(self, special: SpecialType, generic_types: Sequence[str]) -> str:
        kind = special.kind
        if special.is_list():
            inner = special.parameters[0]
            element = self.format_type(inner, generic_types)
            # `[]` binds tighter than `|`
            if inner.is_optional():
                element = f"({element})"
            return f"{element}[]"
        if kind is SpecialKind.OPTION:
            return f"{self.format_type(special.parameters[0], generic_types)} | undefined"
        if kind is SpecialKind.HASH_MAP:
            key, value = special.parameters
            return f"Record<{self.format_type(key, generic_types)}, {self.format_type(value, generic_types)}>"
        if kind in UNREPRESENTABLE:
            raise RustTypeFormatError(
                f"`{kind.value}` cannot be represented by a TypeScript number without losing precision; "
                f"use a JSON-safe integer type or a type override",
                kind.value,
            )
        if kind in TYPESCRIPT_TYPES:
            return TYPESCRIPT_TYPES[kind]
        raise ValueError(f"unknown special type: {kind}")

    def begin_file(self, w: TextIO, data: ParsedData) -> None:
        if not self.config.no_version_header:
            w.write(f"/*\n {version_banner()}\n*/\n\n")

    def write_imports(self, w: TextIO, imports: ScopedCrateTypes) -> None:
        if not imports:
            return
        for crate_name, type_names in imports.items():
            w.write(f"import type {{ {', '.join(type_names)} }} from \"./{crate_name}\";\n")
        w.write("\n")

    def write_type_alias(self, w: TextIO, alias: RustTypeAlias) -> None:
        self.write_comments(w, 0, alias.comments)
        w.write(
            f"export type {self.prefix}{alias.id.original}{self.generic_parameters(alias.generic_types)} = "
            f"{self.format_type(alias.ty, alias.generic_types)};\n\n"
        )

    def write_struct(self, w: TextIO, rs: RustStruct) -> None:
        self.write_comments(w, 0, rs.comments)
        w.write(f"export interface {self.prefix}{rs.id.renamed}{self.generic_parameters(rs.generic_types)} {{\n")
        for f in rs.fields:
            self.write_field(w, 1, f, rs.generic_types)
        w.write("}\n\n")

    def write_field(self, w: TextIO, indent: int, f: RustField, generic_types: Sequence[str]) -> None:
        self.write_comments(w, indent, f.comments)
        tabs = "\t" * indent
        override = f.type_override(self.language.value)
        if override is not None:
            ty = override
        elif f.ty.is_optional():
            ty = self.format_type(f.ty.type_parameters()[0], generic_types)
        else:
            ty = self.format_type(f.ty, generic_types)
        optional = "?" if f.ty.is_optional() or f.has_default else ""
        w.write(f"{tabs}{property_name(f.id.renamed)}{optional}: {ty};\n")

    def write_enum(self, w: TextIO, e: RustEnum) -> None:
        self.write_comments(w, 0, e.shared.comments)
        name = f"{self.prefix}{e.shared.id.renamed}"
        generics = self.generic_parameters(e.shared.generic_types)

        if isinstance(e, UnitEnum):
            w.write(f"export enum {name} {{\n")
            for v in e.shared.variants:
                self.write_comments(w, 1, v.shared.comments)
                w.write(f"\t{v.shared.id.original} = {quote(v.shared.id.renamed)},\n")
            w.write("}\n\n")
        elif isinstance(e, AlgebraicEnum):
            w.write(f"export type {name}{generics} = \n")
            self.write_algebraic_variants(w, e)
            w.write(";\n\n")
        else:
            raise ValueError(f"unknown enum: {e.__class__.__name__}")

    def write_algebraic_variants(self, w: TextIO, e: AlgebraicEnum) -> None:
        tag = property_name(e.tag_key)
        content = property_name(e.content_key)
        arms = []
        for v in e.shared.variants:
            head = f"{tag}: {quote(v.shared.id.renamed)}"
            if isinstance(v, UnitVariant):
                arm = f"\t| {{ {head} }}"
            elif isinstance(v, TupleVariant):
                arm = f"\t| {{ {head}, {content}: {self.format_type(v.ty, e.shared.generic_types)} }}"
            elif isinstance(v, AnonymousStructVariant):
                lines = [f"\t| {{ {head}, {content}: {{\n"]
                for f in v.fields:
                    buf = io.StringIO()
                    self.write_field(buf, 2, f, e.shared.generic_types)
                    lines.append(buf.getvalue())
                lines.append("\t}}")
                arm = "".join(lines)
            else:
                raise ValueError(f"unknown variant: {v.__class__.__name__}")
            comments = io.StringIO()
            self.write_comments(comments, 1, v.shared.comments)
            arms.append(comments.getvalue() + arm)
        w.write("\n".join(arms))

    @staticmethod
    def write_comments(w: TextIO, indent: int, comments: Sequence[str]) -> None:
        if not comments:
            return
        tabs = "\t" * indent
        w.write(f"{tabs}/**\n")
        for comment in comments:
            w.write(f"{tabs} * {comment}\n")
        w.write(f"{tabs} */\n")

