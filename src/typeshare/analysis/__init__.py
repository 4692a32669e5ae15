"""
Cross-file analysis: import tracking and the cross-unit type index.
"""

from .import_visitor import ImportVisitor, accept_crate, accept_type
from .crate_types import CrateTypes, ScopedCrateTypes, all_types, used_imports

__all__ = [
    "ImportVisitor",
    "accept_crate",
    "accept_type",
    "CrateTypes",
    "ScopedCrateTypes",
    "all_types",
    "used_imports",
]
