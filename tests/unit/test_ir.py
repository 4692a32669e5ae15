"""
Tests for the IR: type expressions and the per-crate ParsedData model.
"""

import pytest

from typeshare.ir.nodes import (
    ErrorInfo,
    Id,
    ImportedType,
    ParsedData,
    RustStruct,
    RustTypeAlias,
    UnitEnum,
    EnumShared,
)
from typeshare.ir.types import GenericType, SimpleType, SpecialKind, SpecialType


class TestRustType:

    def test_str(self):
        ty = SpecialType.hash_map(
            SpecialType.primitive(SpecialKind.STRING),
            SpecialType.vec(GenericType("Page", (SimpleType("T"),))),
        )
        assert str(ty) == "HashMap<String, Vec<Page<T>>>"
        assert str(SpecialType.array(SpecialType.primitive(SpecialKind.U8), 4)) == "[u8; 4]"

    def test_structural_equality(self):
        assert SpecialType.option(SimpleType("A")) == SpecialType.option(SimpleType("A"))
        assert hash(SimpleType("A")) == hash(SimpleType("A"))
        assert SimpleType("A") != SimpleType("B")

    def test_identity_is_the_value(self):
        seen = {SpecialType.vec(SimpleType("A")): "list"}
        assert seen[SpecialType.vec(SimpleType("A"))] == "list"
        assert not hasattr(SimpleType("A"), "id")

    def test_is_optional(self):
        assert SpecialType.option(SimpleType("A")).is_optional()
        assert not SpecialType.vec(SimpleType("A")).is_optional()
        assert not SimpleType("Option").is_optional()

    def test_list_kinds(self):
        assert SpecialType.vec(SimpleType("A")).is_list()
        assert SpecialType.slice(SimpleType("A")).is_list()
        assert SpecialType.array(SimpleType("A"), 3).is_list()
        assert not SpecialType.option(SimpleType("A")).is_list()

    def test_primitive_rejects_constructors(self):
        with pytest.raises(ValueError):
            SpecialType.primitive(SpecialKind.VEC)

    def test_contains_type_nested(self):
        ty = SpecialType.vec(SpecialType.option(SimpleType("T")))
        assert ty.contains_type("T")
        assert not ty.contains_type("U")

    def test_contains_type_matches_substrings(self):
        assert SimpleType("Tag").contains_type("T")
        assert GenericType("Wrapper", (SimpleType("X"),)).contains_type("Wrap")


class TestParsedData:

    def test_push_records_type_names(self):
        data = ParsedData(crate_name="c")
        data.push_struct(RustStruct(id=Id.same("S")))
        data.push_enum(UnitEnum(EnumShared(id=Id("E", "e"))))
        data.push_alias(RustTypeAlias(id=Id.same("A"), ty=SimpleType("S")))
        assert data.type_names == {"S", "E", "A"}
        assert not data.is_empty()

    def test_empty(self):
        assert ParsedData(crate_name="c").is_empty()

    def test_errors_make_data_non_empty(self):
        data = ParsedData(crate_name="c")
        data.errors.append(ErrorInfo("c", "c.kt", "Bad", "nope"))
        assert not data.is_empty()

    def test_add_appends_and_unions(self):
        a = ParsedData(crate_name="c")
        a.push_struct(RustStruct(id=Id.same("A")))
        a.import_types.add(ImportedType("other", "X"))
        b = ParsedData(crate_name="c", file_name="c.kt")
        b.push_struct(RustStruct(id=Id.same("B")))
        b.import_types.add(ImportedType("other", "X"))

        a.add(b)

        assert [s.id.original for s in a.structs] == ["A", "B"]
        assert a.type_names == {"A", "B"}
        assert a.import_types == {ImportedType("other", "X")}
        assert a.file_name == "c.kt"

    def test_error_info_str(self):
        err = ErrorInfo("c", "c.kt", "Bad", "tuples are not supported")
        assert str(err) == "c.kt: `Bad`: tuples are not supported"
