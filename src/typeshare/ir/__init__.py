"""
Intermediate representation shared by the frontend and every backend.
"""

from .types import (
    RustType,
    SimpleType,
    GenericType,
    SpecialType,
    SpecialKind,
    PRIMITIVE_NAMES,
)
from .nodes import (
    Id,
    RustField,
    RustStruct,
    RustTypeAlias,
    VariantShared,
    RustEnumVariant,
    UnitVariant,
    TupleVariant,
    AnonymousStructVariant,
    EnumShared,
    RustEnum,
    UnitEnum,
    AlgebraicEnum,
    ImportedType,
    ErrorInfo,
    ParsedData,
)

__all__ = [
    "RustType", "SimpleType", "GenericType", "SpecialType", "SpecialKind", "PRIMITIVE_NAMES",
    "Id", "RustField", "RustStruct", "RustTypeAlias",
    "VariantShared", "RustEnumVariant", "UnitVariant", "TupleVariant", "AnonymousStructVariant",
    "EnumShared", "RustEnum", "UnitEnum", "AlgebraicEnum",
    "ImportedType", "ErrorInfo", "ParsedData",
]
