"""
Tests for the cross-crate type index and per-file import scoping.
"""

from typeshare.analysis.crate_types import all_types, used_imports
from typeshare.ir.nodes import Id, ImportedType, ParsedData, RustStruct


def _crate(name, *types, imports=()):
    data = ParsedData(crate_name=name, multi_file=True)
    for t in types:
        data.push_struct(RustStruct(id=Id.same(t)))
    data.import_types = {ImportedType(crate, ty) for crate, ty in imports}
    return data


class TestAllTypes:

    def test_index(self):
        mapping = {
            "a": _crate("a", "A1", "A2"),
            "b": _crate("b"),
        }
        assert all_types(mapping) == {"a": frozenset({"A1", "A2"}), "b": frozenset()}


class TestUsedImports:

    def _index(self):
        return all_types({
            "models": _crate("models", "User", "Group"),
            "events": _crate("events", "Event"),
            "shared": _crate("shared", "User"),
            "app": _crate("app", "App"),
        })

    def test_named_import(self):
        parsed = _crate("app", imports=[("models", "User")])
        assert used_imports(parsed, self._index()) == {"models": ["User"]}

    def test_name_no_crate_defines_is_dropped(self):
        parsed = _crate("app", imports=[("models", "Missing")])
        assert used_imports(parsed, self._index()) == {}

    def test_reexport_from_known_crate_falls_back_to_definers(self):
        parsed = _crate("app", imports=[("events", "User")])
        assert used_imports(parsed, self._index()) == {"models": ["User"], "shared": ["User"]}

    def test_facade_crate(self):
        crate_types = all_types({
            "app": _crate("app", "A"),
            "facade": _crate("facade", "Bar"),
            "core_types": _crate("core_types", "Foo"),
        })
        parsed = _crate("app", imports=[("facade", "Foo")])
        assert used_imports(parsed, crate_types) == {"core_types": ["Foo"]}

    def test_glob_expands_sorted(self):
        parsed = _crate("app", imports=[("models", "*")])
        assert used_imports(parsed, self._index()) == {"models": ["Group", "User"]}

    def test_glob_from_unknown_crate_is_dropped(self):
        parsed = _crate("app", imports=[("elsewhere", "*")])
        assert used_imports(parsed, self._index()) == {}

    def test_self_references_are_dropped(self):
        parsed = _crate("app", imports=[("app", "App"), ("app", "*")])
        assert used_imports(parsed, self._index()) == {}

    def test_unknown_crate_falls_back_to_definers(self):
        parsed = _crate("app", imports=[("reexports", "User")])
        assert used_imports(parsed, self._index()) == {"models": ["User"], "shared": ["User"]}

    def test_fallback_never_imports_from_self(self):
        parsed = _crate("shared", imports=[("reexports", "User")])
        assert used_imports(parsed, self._index()) == {"models": ["User"]}

    def test_crates_ordered_by_name(self):
        parsed = _crate("app", imports=[("models", "Group"), ("events", "Event"), ("models", "User")])
        result = used_imports(parsed, self._index())
        assert list(result) == ["events", "models"]
        assert result["models"] == ["Group", "User"]
