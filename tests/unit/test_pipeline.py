"""
Tests for input discovery and the parallel parse-and-merge pipeline.
"""

import logging
from itertools import permutations

import pytest

from typeshare.backends import SupportedLanguage
from typeshare.compiler.pipeline import (
    ParserInput,
    check_parse_errors,
    find_crate_name,
    merge_mappings,
    output_file_name,
    parse_input,
    parser_inputs,
    walk_source_files,
)
from typeshare.ir.nodes import ErrorInfo, Id, ImportedType, ParsedData, RustStruct
from typeshare.shared.errors import InputError, ParseError
from typeshare.utils.config import SINGLE_FILE_CRATE_NAME


def _write(path, text=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _data(crate, *types, imports=()):
    data = ParsedData(crate_name=crate, file_name=f"{crate}.kt")
    for t in types:
        data.push_struct(RustStruct(id=Id.same(t)))
    data.import_types = set(imports)
    return data


def _projection(mapping):
    return {
        crate: (frozenset(d.type_names), frozenset(d.import_types), len(d.structs))
        for crate, d in mapping.items()
    }


class TestInputDiscovery:

    def test_find_crate_name(self, tmp_path):
        _write(tmp_path / "my-crate" / "Cargo.toml", "[package]\n")
        source = _write(tmp_path / "my-crate" / "src" / "models" / "user.rs")
        assert find_crate_name(source) == "my_crate"

    def test_nearest_manifest_wins(self, tmp_path):
        _write(tmp_path / "outer" / "Cargo.toml")
        _write(tmp_path / "outer" / "inner" / "Cargo.toml")
        source = _write(tmp_path / "outer" / "inner" / "src" / "lib.rs")
        assert find_crate_name(source) == "inner"

    def test_no_manifest(self, tmp_path):
        source = _write(tmp_path / "loose" / "lib.rs")
        if any((p / "Cargo.toml").is_file() for p in source.resolve().parents):
            pytest.skip("temporary directory lives inside a cargo crate")
        assert find_crate_name(source) is None

    def test_walk_is_sorted_and_filtered(self, tmp_path):
        _write(tmp_path / "b.rs")
        _write(tmp_path / "a.rs")
        _write(tmp_path / "notes.md")
        _write(tmp_path / "sub" / "c.rs")
        _write(tmp_path / "target" / "debug" / "gen.rs")
        _write(tmp_path / ".git" / "hook.rs")
        found = [p.relative_to(tmp_path).as_posix() for p in walk_source_files([tmp_path])]
        assert found == ["a.rs", "b.rs", "sub/c.rs"]

    def test_explicit_file_and_missing_path(self, tmp_path, caplog):
        explicit = _write(tmp_path / "one.txt")
        with caplog.at_level(logging.WARNING, logger="typeshare.compiler.pipeline"):
            found = list(walk_source_files([explicit, tmp_path / "missing"]))
        assert found == [explicit]
        assert "missing" in caplog.text

    @pytest.mark.parametrize("language,expected", [
        (SupportedLanguage.KOTLIN, "my_crate.kt"),
        (SupportedLanguage.SWIFT, "MyCrate.swift"),
        (SupportedLanguage.TYPESCRIPT, "my_crate.ts"),
    ])
    def test_output_file_name(self, language, expected):
        assert output_file_name(language, "my_crate") == expected

    def test_single_file_inputs(self, tmp_path):
        _write(tmp_path / "lib.rs")
        (only,) = parser_inputs([tmp_path], SupportedLanguage.KOTLIN, multi_file=False)
        assert only.crate_name == SINGLE_FILE_CRATE_NAME
        assert only.file_name == f"{SINGLE_FILE_CRATE_NAME}.kt"

    def test_multi_file_inputs(self, tmp_path):
        _write(tmp_path / "core-types" / "Cargo.toml")
        _write(tmp_path / "core-types" / "src" / "lib.rs")
        _write(tmp_path / "scratch.rs")
        inputs = parser_inputs(
            [tmp_path / "core-types", tmp_path / "scratch.rs"],
            SupportedLanguage.SWIFT,
            multi_file=True,
        )
        if len(inputs) == 2:
            pytest.skip("temporary directory lives inside a cargo crate")
        (only,) = inputs
        assert only.crate_name == "core_types"
        assert only.file_name == "CoreTypes.swift"


class TestMerge:

    def test_order_and_partition_invariance(self):
        shards = [
            {"a": _data("a", "A1", imports=[ImportedType("b", "B1")])},
            {"a": _data("a", "A2"), "b": _data("b", "B1")},
            {"b": _data("b", "B2", imports=[ImportedType("a", "*")])},
        ]
        expected = _projection(merge_mappings(shards))
        for order in permutations(shards):
            assert _projection(merge_mappings(order)) == expected
        # re-partitioned: merge two shards first, then the rest
        assert _projection(merge_mappings([merge_mappings(shards[:2]), shards[2]])) == expected
        assert expected["a"][0] == {"A1", "A2"}
        assert expected["b"][1] == {ImportedType("a", "*")}

    def test_inputs_are_not_mutated(self):
        first = {"a": _data("a", "A1")}
        second = {"a": _data("a", "A2")}
        merge_mappings([first, second])
        merge_mappings([first, second])
        assert first["a"].type_names == {"A1"}
        assert [s.id.original for s in first["a"].structs] == ["A1"]

    def test_empty(self):
        assert merge_mappings([]) == {}


class TestParseInput:

    SOURCES = {
        "models.rs": "#[typeshare]\npub struct User { name: String }\n",
        "events.rs": "#[typeshare]\n#[serde(tag = \"t\", content = \"c\")]\npub enum Event { Login(User), Logout }\n",
        "alias.rs": "#[typeshare]\npub type UserId = String;\n",
        "plain.rs": "pub struct NotShared;\n",
        "mentions.rs": "// typeshare is mentioned but nothing is marked\npub struct Quiet;\n",
    }

    def _inputs(self, tmp_path, sources=None):
        inputs = []
        for name, text in sorted((sources or self.SOURCES).items()):
            path = _write(tmp_path / name, text)
            inputs.append(ParserInput(path, f"{SINGLE_FILE_CRATE_NAME}.kt", SINGLE_FILE_CRATE_NAME))
        return inputs

    @pytest.mark.parametrize("jobs", [1, 2, 8])
    def test_merges_by_crate(self, tmp_path, session_parser, jobs):
        mapping = parse_input(self._inputs(tmp_path), jobs=jobs, parser=session_parser)
        assert list(mapping) == [SINGLE_FILE_CRATE_NAME]
        data = mapping[SINGLE_FILE_CRATE_NAME]
        assert data.type_names == {"User", "Event", "UserId"}
        assert len(data.structs) == 1 and len(data.enums) == 1 and len(data.aliases) == 1

    def test_files_contributing_nothing_are_excluded(self, tmp_path, session_parser):
        sources = {k: v for k, v in self.SOURCES.items() if k in ("plain.rs", "mentions.rs")}
        assert parse_input(self._inputs(tmp_path, sources), jobs=2, parser=session_parser) == {}

    def test_no_inputs(self):
        assert parse_input([]) == {}

    def test_ignored_types(self, tmp_path, session_parser):
        mapping = parse_input(self._inputs(tmp_path), ignored_types=["Event"], parser=session_parser)
        assert mapping[SINGLE_FILE_CRATE_NAME].type_names == {"User", "UserId"}

    def test_parse_failure_propagates(self, tmp_path, session_parser):
        sources = dict(self.SOURCES)
        sources["broken.rs"] = "#[typeshare]\npub struct Broken {\n"
        with pytest.raises(ParseError) as exc_info:
            parse_input(self._inputs(tmp_path, sources), jobs=3, parser=session_parser)
        assert exc_info.value.location.file.endswith("broken.rs")

    def test_missing_file_propagates(self, tmp_path, session_parser):
        inputs = self._inputs(tmp_path)
        inputs.append(ParserInput(tmp_path / "gone.rs", "x.kt", SINGLE_FILE_CRATE_NAME))
        with pytest.raises(InputError):
            parse_input(inputs, jobs=2, parser=session_parser)

    def test_item_errors_are_collected_not_raised(self, tmp_path, session_parser):
        sources = {"bad.rs": "#[typeshare]\npub struct Bad { big: u128 }\n"}
        mapping = parse_input(self._inputs(tmp_path, sources), parser=session_parser)
        (err,) = mapping[SINGLE_FILE_CRATE_NAME].errors
        assert err.type_name == "Bad"


class TestCheckParseErrors:

    def test_no_errors(self):
        check_parse_errors({"a": _data("a", "A")})

    def test_errors_are_fatal(self):
        a = _data("a")
        a.errors.append(ErrorInfo("a", "a.kt", "First", "tuples are not supported"))
        b = _data("b")
        b.errors.append(ErrorInfo("b", "b.kt", "Second", "`u128` is not supported"))
        with pytest.raises(ParseError) as exc_info:
            check_parse_errors({"b": b, "a": a})
        err = exc_info.value
        assert err.message == "2 typeshare item(s) could not be generated"
        assert err.source_file == "a.kt"
        assert err.notes() == [
            "a.kt: `First`: tuples are not supported",
            "b.kt: `Second`: `u128` is not supported",
        ]
