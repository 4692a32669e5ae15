"""
Rust Syntax Transformer

Converts the Lark parse tree of a Rust file into syntax tree nodes
(frontend/syntax.py).

Grammar rules that only contribute a piece of their parent (visibility,
where clauses, field lists, bounds) return small marker objects which the
parent rule sorts by type.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from lark import Token, Transformer, v_args

from ...shared.source_location import SourceLocation
from ..syntax import (
    ArrayType,
    AssocType,
    Attribute,
    EnumItem,
    FieldDef,
    GenericParam,
    Generics,
    Item,
    MetaNameValue,
    ModItem,
    OpaqueType,
    OtherItem,
    Path,
    PathSegment,
    PathType,
    RefType,
    SliceType,
    SourceFile,
    StructItem,
    TupleType,
    TypeAliasItem,
    TypeNode,
    UseGlob,
    UseGroup,
    UseItem,
    UseName,
    UsePath,
    UseRename,
    VariantDef,
    WherePredicate,
)
from .literals import LiteralParser
from .meta import MetaParser, extract_paths, flatten_tokens, ident_text

logger = logging.getLogger("typeshare.frontend.transformers")


# Parent-sorted pieces

@dataclass
class _Visibility:
    text: str


@dataclass
class _Fields:
    style: str
    fields: List[FieldDef]


@dataclass
class _WhereClause:
    predicates: List[WherePredicate]


@dataclass
class _Bounds:
    paths: List[Path]


@dataclass
class _GenericArgs:
    args: List[TypeNode]


@dataclass
class _FnOutput:
    ty: TypeNode


@dataclass
class _AttrInput:
    kind: str
    tokens: List[Token] = field(default_factory=list)


class _Marker:
    """Rule result that only signals presence (discriminants, ABIs, const args)."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


_DISCRIMINANT = _Marker("discriminant")
_ABI = _Marker("abi")
_CONST_ARG = _Marker("const_arg")
_FOR_LIFETIMES = _Marker("for_lifetimes")


def doc_text(token: Token) -> str:
    """`/// text` -> `text`"""
    return str(token)[3:].strip()


def block_doc_text(token: Token) -> List[str]:
    """`/** text */` -> lines, with the leading `*` of each line removed."""
    lines = []
    for line in str(token)[3:-2].split("\n"):
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def _split_outer(args) -> tuple:
    """Split leading attributes, doc comments and visibility from the rest."""
    attrs: List[Attribute] = []
    docs: List[str] = []
    visibility: Optional[str] = None
    rest = []
    for arg in args:
        if isinstance(arg, Attribute):
            attrs.append(arg)
            meta = arg.meta
            # #[doc = "..."] is the desugared form of a doc comment
            if (
                isinstance(meta, MetaNameValue)
                and meta.path.is_ident("doc")
                and meta.value is not None
                and meta.value.kind == "str"
            ):
                docs.append(meta.value.value.strip())
        elif isinstance(arg, Token) and arg.type == "DOC_COMMENT":
            docs.append(doc_text(arg))
        elif isinstance(arg, Token) and arg.type == "BLOCK_DOC_COMMENT":
            docs.extend(block_doc_text(arg))
        elif isinstance(arg, _Visibility):
            visibility = arg.text
        else:
            rest.append(arg)
    return attrs, docs, visibility, rest


def _generics_from(rest) -> Generics:
    generics = Generics()
    for arg in rest:
        if isinstance(arg, Generics):
            generics.params = arg.params
        elif isinstance(arg, _WhereClause):
            generics.where_predicates = arg.predicates
    return generics


@v_args(inline=True)
class RustTransformer(Transformer):
    """
    Rust parse tree -> syntax tree.

    Stateless apart from `current_file`, which the parser sets before each
    transform so item locations name their file.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = ""

    def _location(self, meta) -> Optional[SourceLocation]:
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(file=self.current_file, line=meta.line, column=meta.column)

    # =========================================================================
    # FILE AND ITEMS
    # =========================================================================

    def start(self, *items) -> SourceFile:
        attrs = [i for i in items if isinstance(i, Attribute)]
        body = [i for i in items if isinstance(i, Item)]
        return SourceFile(items=body, attrs=attrs, file=self.current_file)

    def attributed_item(self, *args) -> Item:
        attrs, docs, visibility, rest = _split_outer(args)
        item = rest[-1]
        item.attrs = attrs
        item.docs = docs
        item.visibility = visibility
        return item

    def visibility(self, token: Optional[Token] = None) -> _Visibility:
        return _Visibility(" ".join(str(token).split()) if token is not None else "pub")

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    def attribute(self, body: Attribute) -> Attribute:
        return body

    def inner_attr(self, body: Attribute) -> Attribute:
        body.inner = True
        return body

    def attr_body(self, path: Path, attr_input: Optional[_AttrInput] = None) -> Attribute:
        if attr_input is None:
            meta = MetaParser.parse_attribute(path, None, [])
        else:
            meta = MetaParser.parse_attribute(path, attr_input.kind, attr_input.tokens)
        if meta is None:
            logger.debug(f"attribute `{path}` is not a meta item; keeping it opaque")
        return Attribute(path=path, meta=meta)

    def attr_path(self, *idents: str) -> Path:
        return Path([PathSegment(i) for i in idents])

    def attr_delim(self, group: List[Token]) -> _AttrInput:
        return _AttrInput(kind=str(group[0]), tokens=group[1:-1])

    def attr_eq(self, tokens: List[Token]) -> _AttrInput:
        return _AttrInput(kind="=", tokens=tokens)

    def attr_value(self, *parts) -> List[Token]:
        return flatten_tokens(*parts)

    # =========================================================================
    # USE DECLARATIONS
    # =========================================================================

    @v_args(inline=True, meta=True)
    def use_item(self, meta, tree) -> UseItem:
        return UseItem(tree=tree, location=self._location(meta))

    def use_path(self, ident: str, tree) -> UsePath:
        return UsePath(ident, tree)

    def use_name(self, ident: str) -> UseName:
        return UseName(ident)

    def use_rename(self, ident: str, rename: Token) -> UseRename:
        return UseRename(ident, ident_text(rename))

    def use_glob(self) -> UseGlob:
        return UseGlob()

    def use_group(self, *trees) -> UseGroup:
        return UseGroup(list(trees))

    # =========================================================================
    # STRUCTS, ENUMS, ALIASES
    # =========================================================================

    @v_args(inline=True, meta=True)
    def named_struct(self, meta, name: Token, *rest) -> StructItem:
        return self._struct(meta, name, rest, "named")

    @v_args(inline=True, meta=True)
    def tuple_struct(self, meta, name: Token, *rest) -> StructItem:
        return self._struct(meta, name, rest, "tuple")

    @v_args(inline=True, meta=True)
    def unit_struct(self, meta, name: Token, *rest) -> StructItem:
        return self._struct(meta, name, rest, "unit")

    def _struct(self, meta, name: Token, rest, style: str) -> StructItem:
        fields: List[FieldDef] = []
        for arg in rest:
            if isinstance(arg, _Fields):
                fields = arg.fields
        return StructItem(
            ident=ident_text(name),
            generics=_generics_from(rest),
            style=style,
            fields=fields,
            location=self._location(meta),
        )

    def named_fields(self, *fields: FieldDef) -> _Fields:
        return _Fields("named", list(fields))

    def tuple_fields(self, *fields: FieldDef) -> _Fields:
        return _Fields("tuple", list(fields))

    def named_field(self, *args) -> FieldDef:
        attrs, docs, visibility, rest = _split_outer(args)
        name, ty = rest
        return FieldDef(ident_text(name), ty, attrs=attrs, docs=docs, visibility=visibility)

    def tuple_field(self, *args) -> FieldDef:
        attrs, docs, visibility, rest = _split_outer(args)
        return FieldDef(None, rest[0], attrs=attrs, docs=docs, visibility=visibility)

    @v_args(inline=True, meta=True)
    def enum_item(self, meta, name: Token, *rest) -> EnumItem:
        variants = [v for v in rest if isinstance(v, VariantDef)]
        return EnumItem(
            ident=ident_text(name),
            generics=_generics_from(rest),
            variants=variants,
            location=self._location(meta),
        )

    def variant(self, *args) -> VariantDef:
        attrs, docs, _, rest = _split_outer(args)
        name = rest[0]
        style = "unit"
        fields: List[FieldDef] = []
        has_discriminant = False
        for arg in rest[1:]:
            if isinstance(arg, _Fields):
                style, fields = arg.style, arg.fields
            elif arg is _DISCRIMINANT:
                has_discriminant = True
        return VariantDef(
            ident_text(name),
            style=style,
            fields=fields,
            attrs=attrs,
            docs=docs,
            has_discriminant=has_discriminant,
        )

    def discriminant(self, *parts) -> _Marker:
        return _DISCRIMINANT

    def disc_tok(self, token: Token) -> Token:
        return token

    @v_args(inline=True, meta=True)
    def type_alias(self, meta, name: Token, *rest) -> TypeAliasItem:
        return TypeAliasItem(
            ident=ident_text(name),
            generics=_generics_from(rest),
            ty=rest[-1],
            location=self._location(meta),
        )

    @v_args(inline=True, meta=True)
    def mod_decl(self, meta, name: Token) -> ModItem:
        return ModItem(ident=ident_text(name), items=None, location=self._location(meta))

    @v_args(inline=True, meta=True)
    def mod_inline(self, meta, name: Token, *items) -> ModItem:
        body = [i for i in items if isinstance(i, Item)]
        return ModItem(ident=ident_text(name), items=body, location=self._location(meta))

    # =========================================================================
    # OTHER ITEMS (token trees)
    # =========================================================================

    @v_args(inline=True, meta=True)
    def other_item(self, meta, keyword: Token, *pieces) -> OtherItem:
        tokens = flatten_tokens(*pieces)
        return OtherItem(keyword=str(keyword), paths=extract_paths(tokens), location=self._location(meta))

    @v_args(inline=True, meta=True)
    def macro_item(self, meta, name: Token, *pieces) -> OtherItem:
        tokens = flatten_tokens(*pieces)
        return OtherItem(keyword=f"{name}!", paths=extract_paths(tokens), location=self._location(meta))

    def item_keyword(self, token: Token) -> Token:
        return token

    def item_tok(self, token: Token) -> Token:
        return token

    def semi(self, token: Token) -> Token:
        return token

    def item_end(self, *parts) -> List[Token]:
        return flatten_tokens(*parts)

    def paren_group(self, *parts) -> List[Token]:
        return flatten_tokens(*parts)

    def bracket_group(self, *parts) -> List[Token]:
        return flatten_tokens(*parts)

    def brace_group(self, *parts) -> List[Token]:
        return flatten_tokens(*parts)

    # =========================================================================
    # GENERICS
    # =========================================================================

    def generics(self, *params: GenericParam) -> Generics:
        return Generics(params=list(params))

    def lifetime_param(self, lifetime: Token, *bounds) -> GenericParam:
        return GenericParam(str(lifetime), kind="lifetime")

    def type_param(self, name: Token, *rest) -> GenericParam:
        param = GenericParam(ident_text(name), kind="type")
        for arg in rest:
            if isinstance(arg, _Bounds):
                param.bounds = arg.paths
            elif isinstance(arg, TypeNode):
                param.default = arg
        return param

    def const_param(self, name: Token, ty: TypeNode, *default) -> GenericParam:
        return GenericParam(ident_text(name), kind="const")

    def const_default(self, value) -> _Marker:
        return _CONST_ARG

    def lifetime_bounds(self, *lifetimes: Token) -> List[str]:
        return [str(lt) for lt in lifetimes]

    def bounds(self, *bounds) -> _Bounds:
        return _Bounds([b for b in bounds if isinstance(b, Path)])

    def trait_bound(self, *args) -> Path:
        return args[-1]

    def for_lifetimes(self, *lifetimes: Token) -> _Marker:
        return _FOR_LIFETIMES

    def where_clause(self, *predicates: WherePredicate) -> _WhereClause:
        return _WhereClause(list(predicates))

    def type_pred(self, *args) -> WherePredicate:
        ty = next(a for a in args if isinstance(a, TypeNode))
        bounds = next((a.paths for a in args if isinstance(a, _Bounds)), [])
        return WherePredicate(ty, bounds)

    def lifetime_pred(self, lifetime: Token, bounds) -> WherePredicate:
        return WherePredicate(None, [])

    # =========================================================================
    # TYPES
    # =========================================================================

    def path_type(self, path: Path) -> PathType:
        return PathType(path)

    def type_path(self, *segments: PathSegment) -> Path:
        return Path(list(segments))

    def path_segment(self, ident: str, args: Optional[_GenericArgs] = None) -> PathSegment:
        return PathSegment(ident, arguments=args.args if args is not None else [])

    def fn_segment(self, ident: str, *rest) -> PathSegment:
        inputs = [r for r in rest if isinstance(r, TypeNode)]
        output = next((r.ty for r in rest if isinstance(r, _FnOutput)), None)
        return PathSegment(ident, inputs=inputs, output=output)

    def fn_output(self, ty: TypeNode) -> _FnOutput:
        return _FnOutput(ty)

    def path_ident(self, token: Token) -> str:
        return ident_text(token)

    def generic_args(self, *args) -> _GenericArgs:
        return _GenericArgs([a for a in args if isinstance(a, TypeNode)])

    def assoc_binding(self, name: Token, ty: TypeNode) -> AssocType:
        return AssocType(ident_text(name), ty=ty)

    def assoc_constraint(self, name: Token, bounds: _Bounds) -> AssocType:
        return AssocType(ident_text(name), bounds=bounds.paths)

    def const_arg(self, value) -> _Marker:
        return _CONST_ARG

    def ref_type(self, *args) -> RefType:
        lifetime = next((str(a) for a in args if isinstance(a, Token) and a.type == "LIFETIME"), None)
        mutable = any(isinstance(a, Token) and a.type == "MUT" for a in args)
        return RefType(args[-1], lifetime=lifetime, mutable=mutable)

    def paren_type(self, ty: TypeNode) -> TypeNode:
        return ty

    def tuple_type(self, *elems: TypeNode) -> TupleType:
        return TupleType(list(elems))

    def array_type(self, elem: TypeNode, length: Optional[int]) -> ArrayType:
        return ArrayType(elem, length)

    def array_len(self, *parts) -> Optional[int]:
        tokens = flatten_tokens(*parts)
        if len(tokens) == 1 and tokens[0].type == "NUMBER":
            lit = LiteralParser.parse(tokens[0])
            if lit is not None and lit.kind == "int":
                return lit.value
        return None

    def slice_type(self, elem: TypeNode) -> SliceType:
        return SliceType(elem)

    def ptr_type(self, qualifier: Token, elem: TypeNode) -> OpaqueType:
        return OpaqueType("pointer", [elem])

    def dyn_type(self, bounds: _Bounds) -> OpaqueType:
        return OpaqueType("dyn", list(bounds.paths))

    def impl_type(self, bounds: _Bounds) -> OpaqueType:
        return OpaqueType("impl", list(bounds.paths))

    def fn_type(self, *args) -> OpaqueType:
        children = [a for a in args if isinstance(a, TypeNode)]
        children.extend(a.ty for a in args if isinstance(a, _FnOutput))
        return OpaqueType("fn", children)

    def abi(self, *args) -> _Marker:
        return _ABI

    def never_type(self) -> OpaqueType:
        return OpaqueType("never")
