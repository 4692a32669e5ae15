"""
Tests for lowering `#[typeshare]` items into the IR.
"""

import pytest

from typeshare.frontend import lowering
from typeshare.ir.nodes import (
    AlgebraicEnum,
    AnonymousStructVariant,
    Id,
    ImportedType,
    TupleVariant,
    UnitEnum,
    UnitVariant,
)
from typeshare.ir.types import GenericType, SimpleType, SpecialKind, SpecialType
from typeshare.shared.errors import ParseError

STRING = SpecialType.primitive(SpecialKind.STRING)


class TestFileSelection:

    def test_files_without_marker_are_skipped(self, session_parser):
        assert lowering.parse("struct A;", "c", "c.kt", "a.rs", parser=session_parser) is None

    def test_only_marked_items(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            pub struct Shared { a: u8 }

            pub struct Private { b: u8 }

            #[typeshare::typeshare]
            pub struct Qualified;
            """
        )
        assert [s.id.original for s in parsed.structs] == ["Shared", "Qualified"]
        assert parsed.type_names == {"Shared", "Qualified"}

    def test_items_in_inline_modules(self, parse_rust):
        parsed = parse_rust(
            """
            mod outer {
                mod inner {
                    #[typeshare]
                    pub struct Deep;
                }
            }
            """
        )
        assert [s.id.original for s in parsed.structs] == ["Deep"]

    def test_ignored_types(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct Keep;
            #[typeshare]
            struct Drop;
            """,
            ignored_types=["Drop"],
        )
        assert [s.id.original for s in parsed.structs] == ["Keep"]

    def test_malformed_source_raises(self, session_parser):
        with pytest.raises(ParseError):
            lowering.parse("#[typeshare] struct {", "c", "c.kt", "a.rs", parser=session_parser)


class TestStructs:

    def test_fields_and_types(self, parse_rust):
        parsed = parse_rust(
            """
            /// A user account
            #[typeshare]
            pub struct User<'a, T> {
                /// Login name
                pub name: String,
                pub nickname: Option<&'a str>,
                pub tags: Vec<T>,
                pub scores: HashMap<String, u32>,
                pub boxed: Box<Profile>,
                pub page: Page<T>,
                pub bytes: [u8; 16],
                pub nothing: (),
            }
            """
        )
        (rs,) = parsed.structs
        assert rs.id == Id.same("User")
        assert rs.generic_types == ["T"]
        assert rs.comments == ["A user account"]
        assert rs.fields[0].comments == ["Login name"]
        assert [f.ty for f in rs.fields] == [
            STRING,
            SpecialType.option(STRING),
            SpecialType.vec(SimpleType("T")),
            SpecialType.hash_map(STRING, SpecialType.primitive(SpecialKind.U32)),
            SimpleType("Profile"),
            GenericType("Page", (SimpleType("T"),)),
            SpecialType.array(SpecialType.primitive(SpecialKind.U8), 16),
            SpecialType.primitive(SpecialKind.UNIT),
        ]

    def test_collection_spellings(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct C {
                a: BTreeMap<String, String>,
                b: HashSet<String>,
                c: Arc<String>,
                d: &'static [u8],
            }
            """
        )
        tys = [f.ty for f in parsed.structs[0].fields]
        assert tys[0] == SpecialType.hash_map(STRING, STRING)
        assert tys[1] == SpecialType.vec(STRING)
        assert tys[2] == STRING
        assert tys[3] == SpecialType.slice(SpecialType.primitive(SpecialKind.U8))

    def test_qualified_type_keeps_last_segment(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct Q { a: other::models::Widget }
            """
        )
        assert parsed.structs[0].fields[0].ty == SimpleType("Widget")

    def test_serde_renames(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(rename = "Renamed", rename_all = "camelCase")]
            struct Original {
                first_name: String,
                #[serde(rename = "LAST")]
                last_name: String,
                #[serde(rename(serialize = "wire", deserialize = "ignored"))]
                split: String,
            }
            """
        )
        (rs,) = parsed.structs
        assert rs.id == Id("Original", "Renamed")
        assert [f.id.renamed for f in rs.fields] == ["firstName", "LAST", "wire"]
        assert [f.id.original for f in rs.fields] == ["first_name", "last_name", "split"]
        assert parsed.type_names == {"Original"}

    def test_default_and_skip(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct D {
                #[serde(default)]
                a: u8,
                #[serde(default = "make_b")]
                b: u8,
                #[serde(skip)]
                c: u8,
                #[typeshare(skip)]
                d: u8,
                e: u8,
            }
            """
        )
        fields = parsed.structs[0].fields
        assert [f.id.original for f in fields] == ["a", "b", "e"]
        assert [f.has_default for f in fields] == [True, True, False]

    def test_type_overrides(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct O {
                #[typeshare(kotlin = "Int", typescript(type = "bigint"))]
                id: u64,
            }
            """
        )
        (f,) = parsed.structs[0].fields
        assert f.type_overrides == {"kotlin": "Int", "typescript": "bigint"}
        assert f.type_override("swift") is None

    def test_serialized_as_on_field(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            struct S {
                #[typeshare(serialized_as = "String")]
                when: Instant,
            }
            """
        )
        assert parsed.structs[0].fields[0].ty == STRING

    def test_tuple_struct_is_alias(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            pub struct UserId(pub String);
            """
        )
        assert parsed.structs == []
        (alias,) = parsed.aliases
        assert alias.id == Id.same("UserId")
        assert alias.ty == STRING
        assert parsed.type_names == {"UserId"}

    def test_unit_struct_has_no_fields(self, parse_rust):
        parsed = parse_rust("#[typeshare]\nstruct Empty;\n")
        assert parsed.structs[0].fields == []


class TestAliases:

    def test_type_alias(self, parse_rust):
        parsed = parse_rust(
            """
            /// Lookup table
            #[typeshare]
            type Table<V> = HashMap<String, V>;
            """
        )
        (alias,) = parsed.aliases
        assert alias.generic_types == ["V"]
        assert alias.comments == ["Lookup table"]
        assert alias.ty == SpecialType.hash_map(STRING, SimpleType("V"))

    def test_serialized_as_item(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare(serialized_as = "Vec<String>")]
            struct Tags(HashSet<Tag>);
            """
        )
        (alias,) = parsed.aliases
        assert alias.ty == SpecialType.vec(STRING)


class TestEnums:

    def test_unit_enum(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(rename_all = "SCREAMING_SNAKE_CASE")]
            enum Color {
                /// Warm
                DarkRed,
                #[serde(rename = "blue")]
                Blue,
                #[serde(skip)]
                Hidden,
            }
            """
        )
        (e,) = parsed.enums
        assert isinstance(e, UnitEnum)
        variants = e.shared.variants
        assert all(isinstance(v, UnitVariant) for v in variants)
        assert [v.shared.id for v in variants] == [Id("DarkRed", "DARK_RED"), Id("Blue", "blue")]
        assert variants[0].shared.comments == ["Warm"]

    def test_algebraic_enum(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(tag = "type", content = "content")]
            enum Event<T> {
                Started,
                Progress(u32),
                Done { result: T, #[serde(default)] note: String },
            }
            """
        )
        (e,) = parsed.enums
        assert isinstance(e, AlgebraicEnum)
        assert (e.tag_key, e.content_key) == ("type", "content")
        assert e.shared.generic_types == ["T"]
        started, progress, done = e.shared.variants
        assert isinstance(started, UnitVariant)
        assert isinstance(progress, TupleVariant)
        assert progress.ty == SpecialType.primitive(SpecialKind.U32)
        assert isinstance(done, AnonymousStructVariant)
        assert [f.id.original for f in done.fields] == ["result", "note"]
        assert done.fields[1].has_default

    def test_variant_rename_all_applies_to_anonymous_fields(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(tag = "t", content = "c", rename_all = "camelCase")]
            enum E {
                #[serde(rename_all = "camelCase")]
                SomeVariant { inner_field: u8 },
            }
            """
        )
        (variant,) = parsed.enums[0].shared.variants
        assert variant.shared.id == Id("SomeVariant", "someVariant")
        assert variant.fields[0].id == Id("inner_field", "innerField")

    def test_data_enum_without_tagging_is_an_error(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            enum Untagged { A(u8), B }

            #[typeshare]
            struct StillGenerated;
            """
        )
        assert parsed.enums == []
        assert [s.id.original for s in parsed.structs] == ["StillGenerated"]
        (err,) = parsed.errors
        assert err.type_name == "Untagged"
        assert "adjacently tagged" in err.error

    def test_duplicate_wire_names(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            enum Dup {
                #[serde(rename = "x")]
                A,
                #[serde(rename = "x")]
                B,
            }
            """
        )
        (err,) = parsed.errors
        assert "duplicate variant name `x`" in err.error

    def test_multi_field_tuple_variant(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(tag = "t", content = "c")]
            enum Pair { Both(u8, u8) }
            """
        )
        assert "exactly one field" in parsed.errors[0].error


class TestErrors:

    @pytest.mark.parametrize("ty,message", [
        ("u128", "`u128` is not supported"),
        ("(u8, u8)", "tuples are not supported"),
        ("Box<Fn(u8)>", "closure trait"),
        ("Box<dyn Display>", "dyn types are not supported"),
        ("fn(u8)", "fn types are not supported"),
        ("Option<u8, u8>", "expects 1 type parameter"),
    ])
    def test_unsupported_types(self, parse_rust, ty, message):
        parsed = parse_rust(f"#[typeshare]\nstruct Bad {{ field: {ty} }}\n", file_name="bad.kt")
        (err,) = parsed.errors
        assert message in err.error
        assert err.file_name == "bad.kt"
        assert err.crate_name == "my_crate"
        assert parsed.structs == []
        assert not parsed.is_empty()

    def test_tuple_struct_with_two_fields(self, parse_rust):
        parsed = parse_rust("#[typeshare]\nstruct Two(u8, u8);\n")
        assert "more than one field" in parsed.errors[0].error

    def test_unknown_rename_rule(self, parse_rust):
        parsed = parse_rust(
            """
            #[typeshare]
            #[serde(rename_all = "Title Case")]
            struct T { a: u8 }
            """
        )
        assert "unknown rename_all rule" in parsed.errors[0].error


class TestMultiFile:

    def test_import_types_recorded(self, parse_rust):
        parsed = parse_rust(
            """
            use other::Widget;
            use std::collections::HashMap;

            #[typeshare]
            struct Holder {
                w: Widget,
                g: gadgets::Gadget,
            }
            """,
            crate_name="mine",
            multi_file=True,
        )
        assert parsed.multi_file
        assert parsed.import_types == {
            ImportedType("other", "Widget"),
            ImportedType("gadgets", "Gadget"),
        }

    def test_single_file_mode_skips_import_tracking(self, parse_rust):
        parsed = parse_rust("use other::Widget;\n#[typeshare]\nstruct A;\n")
        assert parsed.import_types == set()
