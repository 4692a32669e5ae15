"""
Import Visitor

Rust Pattern: typeshare_core::visitors::ImportVisitor (syn::visit::Visit)

Collects every type one file references from another crate, both through
`use` declarations and through qualified paths (`other_crate::module::Type`)
anywhere else in the file.

Filtering rules:
- the root segment must be a lowercase crate name that is not on the
  deny-list of foundational crates
- the leaf segment must start uppercase (a type, not a function or module)
- `crate` and `super` roots are rewritten to the current crate

The result is a list in visit order; duplicates are kept.
"""

import logging
from typing import AbstractSet, List, Optional

from ..frontend.syntax import (
    Path,
    SyntaxVisitor,
    UseGlob,
    UseGroup,
    UseItem,
    UseName,
    UsePath,
    UseRename,
    UseTree,
)
from ..ir.nodes import ImportedType
from ..utils.config import IGNORED_BASE_CRATES, SELF_CRATE_ALIASES, WILDCARD_TYPE_NAME

logger = logging.getLogger("typeshare.analysis.import_visitor")


def accept_crate(crate_name: str, ignored_crates: AbstractSet[str] = IGNORED_BASE_CRATES) -> bool:
    """Exclude popular crates that won't be typeshared."""
    return crate_name not in ignored_crates and crate_name[:1].islower()


def accept_type(type_name: str) -> bool:
    """Accept names which start with an uppercase character."""
    return type_name[:1].isupper()


class ImportVisitor(SyntaxVisitor[None]):
    """
    Usage:
        visitor = ImportVisitor("my_crate")
        source_file.accept(visitor)
        visitor.import_types  # [ImportedType(...), ...]
    """

    def __init__(self, crate_name: str, ignored_crates: AbstractSet[str] = IGNORED_BASE_CRATES):
        self.crate_name = crate_name
        self.ignored_crates = ignored_crates
        self.import_types: List[ImportedType] = []

    def _resolve_crate(self, root: str) -> str:
        return self.crate_name if root in SELF_CRATE_ALIASES else root

    def visit_path(self, node: Path) -> None:
        """Qualified references outside `use` declarations."""
        imported = self._extract_root_and_type(node)
        if imported is not None:
            self.import_types.append(imported)
        super().visit_path(node)

    def _extract_root_and_type(self, path: Path) -> Optional[ImportedType]:
        if not path.segments:
            return None
        first, last = path.first, path.last
        if not (accept_crate(first, self.ignored_crates) and accept_type(last)):
            return None
        if first == last:
            return None
        return ImportedType(base_crate=self._resolve_crate(first), type_name=last)

    def visit_use_item(self, node: UseItem) -> None:
        if node.tree is not None:
            self.import_types.extend(self.parse_import(node.tree))

    def parse_import(self, tree: UseTree) -> List[ImportedType]:
        """Expand one `use` tree into the imported types it names."""
        names: List[str] = []
        imported: List[ImportedType] = []
        self._traverse(tree, names, imported)
        return imported

    def _traverse(self, tree: UseTree, names: List[str], imported: List[ImportedType]) -> None:
        if isinstance(tree, UsePath):
            names.append(tree.ident)
            self._traverse(tree.tree, names, imported)
        elif isinstance(tree, UseName):
            # `use foo;` names the crate itself
            root = names[0] if names else tree.ident
            if accept_crate(root, self.ignored_crates) and accept_type(tree.ident):
                imported.append(ImportedType(base_crate=self._resolve_crate(root), type_name=tree.ident))
        elif isinstance(tree, UseRename):
            # TODO: track the alias so renamed imports resolve under their local name
            names.append(tree.ident)
        elif isinstance(tree, UseGlob):
            if names and accept_crate(names[0], self.ignored_crates):
                imported.append(ImportedType(base_crate=self._resolve_crate(names[0]), type_name=WILDCARD_TYPE_NAME))
        elif isinstance(tree, UseGroup):
            for item in tree.items:
                self._traverse(item, names, imported)
        else:
            raise ValueError(f"unknown use tree: {tree.__class__.__name__}")
