"""
Rust Syntax Tree

Rust Pattern: syn::File / syn::Item

The subset of Rust syntax typeshare needs. Declarations that can be
typeshared (structs, enums, type aliases) keep their full shape; `use`
trees keep their structure for import tracking; every other item keeps only
the qualified paths it mentions.

Visitor Pattern Support:
- Every node has accept() which calls the matching visit_* method
- SyntaxVisitor provides default traversal; override what you need
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar, Union

from ..shared.source_location import SourceLocation

T = TypeVar("T")


class SyntaxNode:
    """Base class for syntax nodes"""

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


# ============================================================================
# Paths
# ============================================================================

@dataclass
class PathSegment(SyntaxNode):
    """
    One `::`-separated segment.

    `arguments` holds the angle-bracketed type arguments; `inputs` and
    `output` are set for parenthesized `Fn(A) -> B` sugar.
    """
    ident: str
    arguments: List["TypeNode"] = field(default_factory=list)
    inputs: Optional[List["TypeNode"]] = None
    output: Optional["TypeNode"] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_path_segment(self)


@dataclass
class Path(SyntaxNode):
    segments: List[PathSegment]
    leading_colon: bool = False

    @property
    def first(self) -> str:
        return self.segments[0].ident

    @property
    def last(self) -> str:
        return self.segments[-1].ident

    def idents(self) -> List[str]:
        return [s.ident for s in self.segments]

    def is_ident(self, name: str) -> bool:
        return len(self.segments) == 1 and self.segments[0].ident == name

    def __str__(self) -> str:
        prefix = "::" if self.leading_colon else ""
        return prefix + "::".join(self.idents())

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_path(self)


# ============================================================================
# Attributes
# ============================================================================

@dataclass
class Lit:
    """A literal inside an attribute: `kind` is str, int, float, char or bool."""
    kind: str
    value: Any


@dataclass
class MetaPath:
    path: Path


@dataclass
class MetaNameValue:
    """`name = value`. `value` is None when the right side is not a literal."""
    path: Path
    value: Optional[Lit]


@dataclass
class MetaList:
    path: Path
    nested: List[Union["Meta", Lit]] = field(default_factory=list)


Meta = Union[MetaPath, MetaNameValue, MetaList]


@dataclass
class Attribute(SyntaxNode):
    """
    `#[...]` or `#![...]`.

    `meta` is None when the attribute's tokens do not form a meta item,
    e.g. `#[arg(value_parser = clap::value_parser!(u16))]`.
    """
    path: Path
    meta: Optional[Meta] = None
    inner: bool = False

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_attribute(self)


# ============================================================================
# Types
# ============================================================================

class TypeNode(SyntaxNode):
    """Base class for type expressions"""


@dataclass
class PathType(TypeNode):
    path: Path

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_path_type(self)


@dataclass
class RefType(TypeNode):
    elem: TypeNode
    lifetime: Optional[str] = None
    mutable: bool = False

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_ref_type(self)


@dataclass
class TupleType(TypeNode):
    elems: List[TypeNode] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_tuple_type(self)


@dataclass
class ArrayType(TypeNode):
    elem: TypeNode
    length: Optional[int] = None  # None when the length is not an integer literal

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_array_type(self)


@dataclass
class SliceType(TypeNode):
    elem: TypeNode

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_slice_type(self)


@dataclass
class OpaqueType(TypeNode):
    """
    A type typeshare cannot describe: `dyn`/`impl` trait objects, `fn`
    pointers, raw pointers and `!`. Paths inside it are kept for import
    tracking.
    """
    kind: str
    children: List[SyntaxNode] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_opaque_type(self)


@dataclass
class AssocType(TypeNode):
    """`Item = T` or `Item: Bound` inside generic arguments."""
    name: str
    ty: Optional[TypeNode] = None
    bounds: List[Path] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_assoc_type(self)


# ============================================================================
# Generics
# ============================================================================

@dataclass
class GenericParam(SyntaxNode):
    """`kind` is "type", "lifetime" or "const"."""
    name: str
    kind: str = "type"
    bounds: List[Path] = field(default_factory=list)
    default: Optional[TypeNode] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_generic_param(self)


@dataclass
class WherePredicate(SyntaxNode):
    bounded_ty: Optional[TypeNode]
    bounds: List[Path] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_where_predicate(self)


@dataclass
class Generics(SyntaxNode):
    params: List[GenericParam] = field(default_factory=list)
    where_predicates: List[WherePredicate] = field(default_factory=list)

    def type_params(self) -> List[str]:
        return [p.name for p in self.params if p.kind == "type"]

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_generics(self)


# ============================================================================
# Items
# ============================================================================

@dataclass
class FieldDef(SyntaxNode):
    """A named or positional field. `ident` is None for tuple fields."""
    ident: Optional[str]
    ty: TypeNode
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)
    visibility: Optional[str] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_field_def(self)


@dataclass
class VariantDef(SyntaxNode):
    """`style` is "unit", "tuple" or "named"."""
    ident: str
    style: str = "unit"
    fields: List[FieldDef] = field(default_factory=list)
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)
    has_discriminant: bool = False

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_variant_def(self)


@dataclass
class Item(SyntaxNode):
    """Base for items; attrs and docs are the outer attributes in order."""
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)
    visibility: Optional[str] = None
    location: Optional[SourceLocation] = None


@dataclass
class StructItem(Item):
    """`style` is "named", "tuple" or "unit"."""
    ident: str = ""
    generics: Generics = field(default_factory=Generics)
    style: str = "named"
    fields: List[FieldDef] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_struct_item(self)


@dataclass
class EnumItem(Item):
    ident: str = ""
    generics: Generics = field(default_factory=Generics)
    variants: List[VariantDef] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_enum_item(self)


@dataclass
class TypeAliasItem(Item):
    ident: str = ""
    generics: Generics = field(default_factory=Generics)
    ty: Optional[TypeNode] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_type_alias_item(self)


@dataclass
class ModItem(Item):
    """`items` is None for out-of-line `mod name;`."""
    ident: str = ""
    items: Optional[List[Item]] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_mod_item(self)


@dataclass
class OtherItem(Item):
    """Any item typeshare does not declare: fn, impl, trait, const, macros."""
    keyword: str = ""
    paths: List[Path] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_other_item(self)


# Use trees

class UseTree(SyntaxNode):
    """Base for `use` tree nodes"""


@dataclass
class UsePath(UseTree):
    ident: str
    tree: UseTree

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_tree(self)


@dataclass
class UseName(UseTree):
    ident: str

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_tree(self)


@dataclass
class UseRename(UseTree):
    ident: str
    rename: str

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_tree(self)


@dataclass
class UseGlob(UseTree):
    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_tree(self)


@dataclass
class UseGroup(UseTree):
    items: List[UseTree] = field(default_factory=list)

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_tree(self)


@dataclass
class UseItem(Item):
    tree: Optional[UseTree] = None

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_use_item(self)


@dataclass
class SourceFile(SyntaxNode):
    """A parsed `.rs` file; `attrs` holds its inner attributes."""
    items: List[Item] = field(default_factory=list)
    attrs: List[Attribute] = field(default_factory=list)
    file: str = ""

    def accept(self, visitor: "SyntaxVisitor[T]") -> T:
        return visitor.visit_source_file(self)


# ============================================================================
# Visitor
# ============================================================================

class SyntaxVisitor(Generic[T]):
    """
    Base syntax visitor with default traversal for all nodes.

    Attributes are not traversed by default: their paths are not type
    references.

    Usage:
        class PathCounter(SyntaxVisitor[None]):
            def __init__(self):
                self.count = 0

            def visit_path(self, node):
                self.count += 1
                super().visit_path(node)
    """

    def visit_source_file(self, node: SourceFile) -> T:
        for item in node.items:
            item.accept(self)

    def visit_struct_item(self, node: StructItem) -> T:
        node.generics.accept(self)
        for f in node.fields:
            f.accept(self)

    def visit_enum_item(self, node: EnumItem) -> T:
        node.generics.accept(self)
        for v in node.variants:
            v.accept(self)

    def visit_type_alias_item(self, node: TypeAliasItem) -> T:
        node.generics.accept(self)
        if node.ty is not None:
            node.ty.accept(self)

    def visit_mod_item(self, node: ModItem) -> T:
        for item in node.items or ():
            item.accept(self)

    def visit_other_item(self, node: OtherItem) -> T:
        for path in node.paths:
            path.accept(self)

    def visit_use_item(self, node: UseItem) -> T:
        if node.tree is not None:
            node.tree.accept(self)

    def visit_use_tree(self, node: UseTree) -> T:
        if isinstance(node, UsePath):
            node.tree.accept(self)
        elif isinstance(node, UseGroup):
            for item in node.items:
                item.accept(self)

    def visit_field_def(self, node: FieldDef) -> T:
        node.ty.accept(self)

    def visit_variant_def(self, node: VariantDef) -> T:
        for f in node.fields:
            f.accept(self)

    def visit_generics(self, node: Generics) -> T:
        for param in node.params:
            param.accept(self)
        for pred in node.where_predicates:
            pred.accept(self)

    def visit_generic_param(self, node: GenericParam) -> T:
        for bound in node.bounds:
            bound.accept(self)
        if node.default is not None:
            node.default.accept(self)

    def visit_where_predicate(self, node: WherePredicate) -> T:
        if node.bounded_ty is not None:
            node.bounded_ty.accept(self)
        for bound in node.bounds:
            bound.accept(self)

    def visit_attribute(self, node: Attribute) -> T:
        pass

    # Types

    def visit_path_type(self, node: PathType) -> T:
        node.path.accept(self)

    def visit_ref_type(self, node: RefType) -> T:
        node.elem.accept(self)

    def visit_tuple_type(self, node: TupleType) -> T:
        for elem in node.elems:
            elem.accept(self)

    def visit_array_type(self, node: ArrayType) -> T:
        node.elem.accept(self)

    def visit_slice_type(self, node: SliceType) -> T:
        node.elem.accept(self)

    def visit_opaque_type(self, node: OpaqueType) -> T:
        for child in node.children:
            child.accept(self)

    def visit_assoc_type(self, node: AssocType) -> T:
        if node.ty is not None:
            node.ty.accept(self)
        for bound in node.bounds:
            bound.accept(self)

    # Paths

    def visit_path(self, node: Path) -> T:
        for segment in node.segments:
            segment.accept(self)

    def visit_path_segment(self, node: PathSegment) -> T:
        for arg in node.arguments:
            arg.accept(self)
        for arg in node.inputs or ():
            arg.accept(self)
        if node.output is not None:
            node.output.accept(self)
