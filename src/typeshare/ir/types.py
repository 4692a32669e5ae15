"""
Type expressions

Rust Pattern: typeshare_core::rust_types::RustType

A field, alias or variant payload refers to a type through one of three
shapes:

- SimpleType:  a user type with no parameters (`Location`, `T`)
- GenericType: a user type applied to parameters (`Page<Item>`)
- SpecialType: one of the built-in constructors every backend must map
  (`Vec`, `Option`, `HashMap`, integers, ...)

All shapes are frozen dataclasses so they can be shared, hashed and
compared structurally.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SpecialKind(Enum):
    """
    Closed set of built-in type constructors.

    I54 and U53 are the JSON-safe integer widths. They are separate kinds
    from I64/U64 so that backends whose number type loses precision above
    2^53 can keep them apart.
    """
    VEC = "Vec"
    ARRAY = "Array"
    SLICE = "Slice"
    OPTION = "Option"
    HASH_MAP = "HashMap"
    UNIT = "()"
    STRING = "String"
    CHAR = "char"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I54 = "I54"
    I64 = "i64"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U53 = "U53"
    U64 = "u64"
    USIZE = "usize"
    BOOL = "bool"
    F32 = "f32"
    F64 = "f64"


# Number of type parameters each constructor takes
SPECIAL_ARITY = {
    SpecialKind.VEC: 1,
    SpecialKind.ARRAY: 1,
    SpecialKind.SLICE: 1,
    SpecialKind.OPTION: 1,
    SpecialKind.HASH_MAP: 2,
}

LIST_KINDS = frozenset({SpecialKind.VEC, SpecialKind.ARRAY, SpecialKind.SLICE})

# Rust spellings of the parameterless kinds
PRIMITIVE_NAMES = {
    "String": SpecialKind.STRING,
    "str": SpecialKind.STRING,
    "char": SpecialKind.CHAR,
    "bool": SpecialKind.BOOL,
    "i8": SpecialKind.I8,
    "i16": SpecialKind.I16,
    "i32": SpecialKind.I32,
    "I54": SpecialKind.I54,
    "i64": SpecialKind.I64,
    "isize": SpecialKind.ISIZE,
    "u8": SpecialKind.U8,
    "u16": SpecialKind.U16,
    "u32": SpecialKind.U32,
    "U53": SpecialKind.U53,
    "u64": SpecialKind.U64,
    "usize": SpecialKind.USIZE,
    "f32": SpecialKind.F32,
    "f64": SpecialKind.F64,
}


@dataclass(frozen=True)
class RustType:
    """Base class for type expressions."""

    def type_parameters(self) -> Tuple["RustType", ...]:
        return ()

    def contains_type(self, name: str) -> bool:
        """
        Occurrence search used to find which generic parameters a type uses.

        Matches by substring on type names, so `T` is also found inside
        `Tag`. Callers filter generic parameter lists with it and accept the
        over-inclusion.
        """
        return any(p.contains_type(name) for p in self.type_parameters())

    def is_optional(self) -> bool:
        return False


@dataclass(frozen=True)
class SimpleType(RustType):
    name: str

    def contains_type(self, name: str) -> bool:
        return name in self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class GenericType(RustType):
    name: str
    parameters: Tuple[RustType, ...]

    def type_parameters(self) -> Tuple[RustType, ...]:
        return self.parameters

    def contains_type(self, name: str) -> bool:
        return name in self.name or super().contains_type(name)

    def __str__(self) -> str:
        return f"{self.name}<{', '.join(str(p) for p in self.parameters)}>"


@dataclass(frozen=True)
class SpecialType(RustType):
    kind: SpecialKind
    parameters: Tuple[RustType, ...] = ()
    length: Optional[int] = None  # Array only

    def type_parameters(self) -> Tuple[RustType, ...]:
        return self.parameters

    def is_optional(self) -> bool:
        return self.kind is SpecialKind.OPTION

    def is_list(self) -> bool:
        return self.kind in LIST_KINDS

    # Constructors

    @classmethod
    def vec(cls, inner: RustType) -> "SpecialType":
        return cls(SpecialKind.VEC, (inner,))

    @classmethod
    def array(cls, inner: RustType, length: int) -> "SpecialType":
        return cls(SpecialKind.ARRAY, (inner,), length)

    @classmethod
    def slice(cls, inner: RustType) -> "SpecialType":
        return cls(SpecialKind.SLICE, (inner,))

    @classmethod
    def option(cls, inner: RustType) -> "SpecialType":
        return cls(SpecialKind.OPTION, (inner,))

    @classmethod
    def hash_map(cls, key: RustType, value: RustType) -> "SpecialType":
        return cls(SpecialKind.HASH_MAP, (key, value))

    @classmethod
    def primitive(cls, kind: SpecialKind) -> "SpecialType":
        if kind in SPECIAL_ARITY:
            raise ValueError(f"{kind.value} takes type parameters")
        return cls(kind)

    def __str__(self) -> str:
        if self.kind is SpecialKind.ARRAY:
            return f"[{self.parameters[0]}; {self.length}]"
        if self.parameters:
            return f"{self.kind.value}<{', '.join(str(p) for p in self.parameters)}>"
        return self.kind.value
