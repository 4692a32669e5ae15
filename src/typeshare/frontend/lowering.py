"""
Lowering: syntax tree -> IR

Rust Pattern: typeshare_core::parser::parse

Entry point of the parser contract. Reads one source file and returns the
`ParsedData` for it:

- files that never mention `typeshare` are skipped without parsing
- every `#[typeshare]` struct, enum and type alias is lowered to IR, also
  inside inline modules
- an item that cannot be represented is recorded as an ErrorInfo instead of
  aborting the file
- in multi-file mode the import visitor records cross-crate references
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..analysis.import_visitor import ImportVisitor
from ..ir.nodes import (
    AlgebraicEnum,
    AnonymousStructVariant,
    EnumShared,
    ErrorInfo,
    Id,
    ParsedData,
    RustEnum,
    RustEnumVariant,
    RustField,
    RustStruct,
    RustTypeAlias,
    TupleVariant,
    UnitEnum,
    UnitVariant,
    VariantShared,
)
from ..ir.types import PRIMITIVE_NAMES, GenericType, RustType, SimpleType, SpecialKind, SpecialType
from ..utils.config import TYPESHARE_ATTRIBUTE
from ..utils.rename import RENAME_RULES, apply_rename_rule
from .attributes import (
    has_typeshare,
    is_skipped,
    serde_flag,
    serde_rename,
    serde_value,
    type_overrides,
    typeshare_value,
)
from .parser import Parser, default_parser
from .syntax import (
    ArrayType,
    AssocType,
    Attribute,
    EnumItem,
    FieldDef,
    Item,
    ModItem,
    OpaqueType,
    PathType,
    RefType,
    SliceType,
    StructItem,
    TupleType,
    TypeAliasItem,
    TypeNode,
    VariantDef,
)

logger = logging.getLogger("typeshare.frontend.lowering")

# Smart pointers and borrows serialize as their contents
TRANSPARENT_WRAPPERS = frozenset({"Box", "Rc", "Arc", "Cow"})
LIST_TYPES = frozenset({"Vec", "VecDeque", "HashSet", "BTreeSet", "LinkedList"})
MAP_TYPES = frozenset({"HashMap", "BTreeMap", "IndexMap"})
UNSUPPORTED_PRIMITIVES = frozenset({"u128", "i128"})


class UnsupportedItem(Exception):
    """An item (or one of its types) has no IR representation."""


def parse(
    source: str,
    crate_name: str,
    file_name: str,
    file_path: str,
    ignored_types: Iterable[str] = (),
    multi_file: bool = False,
    parser: Optional[Parser] = None,
) -> Optional[ParsedData]:
    """
    Parse one file into ParsedData.

    Returns None when the text does not mention `typeshare`. Raises
    ParseError for malformed source.
    """
    if TYPESHARE_ATTRIBUTE not in source:
        return None

    parser = parser or default_parser()
    tree = parser.parse(source, str(file_path))

    parsed = ParsedData(crate_name=crate_name, file_name=file_name, multi_file=multi_file)
    lowerer = ItemLowerer(parser, crate_name, file_name, set(ignored_types))
    lowerer.lower_items(tree.items, parsed)

    if multi_file:
        visitor = ImportVisitor(crate_name)
        tree.accept(visitor)
        parsed.import_types = set(visitor.import_types)

    logger.debug(
        f"{file_path}: {len(parsed.structs)} structs, {len(parsed.enums)} enums, "
        f"{len(parsed.aliases)} aliases, {len(parsed.errors)} errors"
    )
    return parsed


class ItemLowerer:
    """Lowers `#[typeshare]` items of one file into a ParsedData."""

    def __init__(self, parser: Parser, crate_name: str, file_name: str, ignored_types: Set[str]):
        self.parser = parser
        self.crate_name = crate_name
        self.file_name = file_name
        self.ignored_types = ignored_types

    def lower_items(self, items: Sequence[Item], parsed: ParsedData) -> None:
        for item in items:
            if isinstance(item, ModItem):
                if item.items is not None:
                    self.lower_items(item.items, parsed)
                continue
            if not isinstance(item, (StructItem, EnumItem, TypeAliasItem)):
                continue
            if not has_typeshare(item.attrs) or item.ident in self.ignored_types:
                continue
            try:
                self.lower_item(item, parsed)
            except UnsupportedItem as e:
                logger.debug(f"rejected `{item.ident}`: {e}")
                parsed.errors.append(ErrorInfo(
                    crate_name=self.crate_name,
                    file_name=self.file_name,
                    type_name=item.ident,
                    error=str(e),
                ))

    def lower_item(self, item: Item, parsed: ParsedData) -> None:
        serialized_as = typeshare_value(item.attrs, "serialized_as")
        if serialized_as is not None:
            parsed.push_alias(RustTypeAlias(
                id=self._item_id(item),
                ty=self.lower_type(self.parser.parse_type(serialized_as, self.file_name)),
                generic_types=item.generics.type_params(),
                comments=list(item.docs),
            ))
        elif isinstance(item, StructItem):
            self.lower_struct(item, parsed)
        elif isinstance(item, EnumItem):
            parsed.push_enum(self.lower_enum(item))
        elif isinstance(item, TypeAliasItem):
            parsed.push_alias(RustTypeAlias(
                id=self._item_id(item),
                ty=self.lower_type(item.ty),
                generic_types=item.generics.type_params(),
                comments=list(item.docs),
            ))
        else:
            raise ValueError(f"cannot lower {item.__class__.__name__}")

    # =========================================================================
    # STRUCTS
    # =========================================================================

    def lower_struct(self, item: StructItem, parsed: ParsedData) -> None:
        generic_types = item.generics.type_params()
        if item.style == "tuple":
            # Newtype structs serialize as their single field
            if len(item.fields) != 1:
                raise UnsupportedItem("tuple structs with more than one field are not supported")
            parsed.push_alias(RustTypeAlias(
                id=self._item_id(item),
                ty=self._field_type(item.fields[0]),
                generic_types=generic_types,
                comments=list(item.docs),
            ))
            return

        parsed.push_struct(RustStruct(
            id=self._item_id(item),
            generic_types=generic_types,
            fields=self.lower_fields(item.fields, self._rename_all(item.attrs)),
            comments=list(item.docs),
        ))

    def lower_fields(self, fields: Sequence[FieldDef], rename_all: Optional[str]) -> List[RustField]:
        lowered = []
        for f in fields:
            if is_skipped(f.attrs):
                continue
            renamed = serde_rename(f.attrs)
            if renamed is None:
                renamed = apply_rename_rule(rename_all, f.ident)
            lowered.append(RustField(
                id=Id(original=f.ident, renamed=renamed),
                ty=self._field_type(f),
                comments=list(f.docs),
                has_default=serde_flag(f.attrs, "default"),
                type_overrides=type_overrides(f.attrs),
            ))
        return lowered

    def _field_type(self, f: FieldDef) -> RustType:
        serialized_as = typeshare_value(f.attrs, "serialized_as")
        if serialized_as is not None:
            return self.lower_type(self.parser.parse_type(serialized_as, self.file_name))
        return self.lower_type(f.ty)

    # =========================================================================
    # ENUMS
    # =========================================================================

    def lower_enum(self, item: EnumItem) -> RustEnum:
        rename_all = self._rename_all(item.attrs)
        variants = [self.lower_variant(v, rename_all) for v in item.variants if not is_skipped(v.attrs)]

        seen = set()
        for v in variants:
            wire = v.shared.id.renamed
            if wire in seen:
                raise UnsupportedItem(f"duplicate variant name `{wire}` in enum `{item.ident}`")
            seen.add(wire)

        shared = EnumShared(
            id=self._item_id(item),
            generic_types=item.generics.type_params(),
            comments=list(item.docs),
            variants=variants,
        )
        if all(isinstance(v, UnitVariant) for v in variants):
            return UnitEnum(shared)

        tag_key = serde_value(item.attrs, "tag")
        content_key = serde_value(item.attrs, "content")
        if tag_key is None or content_key is None:
            raise UnsupportedItem(
                f"enum `{item.ident}` has variants with data and must be adjacently tagged: "
                f'#[serde(tag = "...", content = "...")]'
            )
        return AlgebraicEnum(shared, tag_key=tag_key, content_key=content_key)

    def lower_variant(self, v: VariantDef, rename_all: Optional[str]) -> RustEnumVariant:
        renamed = serde_rename(v.attrs)
        if renamed is None:
            renamed = apply_rename_rule(rename_all, v.ident)
        shared = VariantShared(id=Id(original=v.ident, renamed=renamed), comments=list(v.docs))

        if v.style == "unit":
            return UnitVariant(shared)
        if v.style == "tuple":
            if len(v.fields) != 1:
                raise UnsupportedItem(
                    f"tuple variant `{v.ident}` must have exactly one field, found {len(v.fields)}"
                )
            return TupleVariant(shared, ty=self._field_type(v.fields[0]))
        if v.style == "named":
            return AnonymousStructVariant(shared, fields=self.lower_fields(v.fields, self._rename_all(v.attrs)))
        raise ValueError(f"unknown variant style: {v.style}")

    # =========================================================================
    # TYPES
    # =========================================================================

    def lower_type(self, node: TypeNode) -> RustType:
        """Map a syntax type onto the IR type constructors."""
        if isinstance(node, PathType):
            segment = node.path.segments[-1]
            name = segment.ident
            if segment.inputs is not None:
                raise UnsupportedItem(f"closure trait `{name}` is not supported")
            params = tuple(self.lower_type(a) for a in segment.arguments)
            return self._path_type(name, params)

        if isinstance(node, RefType):
            if isinstance(node.elem, SliceType):
                return SpecialType.slice(self.lower_type(node.elem.elem))
            return self.lower_type(node.elem)

        if isinstance(node, SliceType):
            return SpecialType.slice(self.lower_type(node.elem))

        if isinstance(node, ArrayType):
            return SpecialType(SpecialKind.ARRAY, (self.lower_type(node.elem),), node.length)

        if isinstance(node, TupleType):
            if not node.elems:
                return SpecialType.primitive(SpecialKind.UNIT)
            raise UnsupportedItem("tuples are not supported")

        if isinstance(node, OpaqueType):
            raise UnsupportedItem(f"{node.kind} types are not supported")

        if isinstance(node, AssocType):
            raise UnsupportedItem(f"associated type binding `{node.name}` is not supported")

        raise ValueError(f"unknown type node: {node.__class__.__name__}")

    def _path_type(self, name: str, params: tuple) -> RustType:
        if name in TRANSPARENT_WRAPPERS:
            return self._expect_arity(name, params, 1)[0]
        if name == "Option":
            return SpecialType.option(self._expect_arity(name, params, 1)[0])
        if name in LIST_TYPES:
            return SpecialType.vec(self._expect_arity(name, params, 1)[0])
        if name in MAP_TYPES:
            key, value = self._expect_arity(name, params, 2)
            return SpecialType.hash_map(key, value)
        if name in UNSUPPORTED_PRIMITIVES:
            raise UnsupportedItem(f"`{name}` is not supported")
        if name in PRIMITIVE_NAMES and not params:
            return SpecialType.primitive(PRIMITIVE_NAMES[name])
        if params:
            return GenericType(name, params)
        return SimpleType(name)

    @staticmethod
    def _expect_arity(name: str, params: tuple, arity: int) -> tuple:
        if len(params) != arity:
            raise UnsupportedItem(f"`{name}` expects {arity} type parameter(s), found {len(params)}")
        return params

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _item_id(item: Item) -> Id:
        renamed = serde_rename(item.attrs)
        return Id(original=item.ident, renamed=renamed if renamed is not None else item.ident)

    @staticmethod
    def _rename_all(attrs: Sequence[Attribute]) -> Optional[str]:
        rule = serde_value(attrs, "rename_all")
        if rule is not None and rule not in RENAME_RULES:
            raise UnsupportedItem(f"unknown rename_all rule `{rule}`")
        return rule
