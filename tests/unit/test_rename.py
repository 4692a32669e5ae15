"""
Tests for serde rename_all case conversion.
"""

import pytest

from typeshare.utils.rename import (
    RENAME_RULES,
    apply_rename_rule,
    remove_dash_from_identifier,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_screaming_snake_case,
    to_snake_case,
)


class TestCaseConversion:

    def test_pascal_from_snake(self):
        assert to_pascal_case("field_name") == "FieldName"
        assert to_pascal_case("foo-bar") == "FooBar"

    def test_pascal_keeps_pascal(self):
        assert to_pascal_case("AlreadyPascal") == "AlreadyPascal"

    def test_pascal_lowers_all_caps(self):
        assert to_pascal_case("URL") == "Url"

    def test_camel(self):
        assert to_camel_case("field_name") == "fieldName"
        assert to_camel_case("MyVariant") == "myVariant"
        assert to_camel_case("") == ""

    def test_snake_from_pascal(self):
        assert to_snake_case("MyVariant") == "my_variant"
        assert to_snake_case("already_snake") == "already_snake"

    def test_screaming_snake(self):
        assert to_screaming_snake_case("MyVariant") == "MY_VARIANT"

    def test_kebab(self):
        assert to_kebab_case("MyVariant") == "my-variant"
        assert to_kebab_case("field_name") == "field-name"


class TestRenameRules:

    @pytest.mark.parametrize("rule,expected", [
        ("lowercase", "myvariant"),
        ("UPPERCASE", "MYVARIANT"),
        ("camelCase", "myVariant"),
        ("snake_case", "my_variant"),
        ("SCREAMING_SNAKE_CASE", "MY_VARIANT"),
        ("kebab-case", "my-variant"),
        ("SCREAMING-KEBAB-CASE", "MY-VARIANT"),
        ("PascalCase", "MyVariant"),
    ])
    def test_variant_names(self, rule, expected):
        assert apply_rename_rule(rule, "MyVariant") == expected

    def test_no_rule_is_identity(self):
        assert apply_rename_rule(None, "some_field") == "some_field"

    def test_unknown_rule(self):
        assert "Title Case" not in RENAME_RULES
        with pytest.raises(KeyError):
            apply_rename_rule("Title Case", "x")

    def test_remove_dash(self):
        assert remove_dash_from_identifier("content-type") == "content_type"
        assert remove_dash_from_identifier("plain") == "plain"
