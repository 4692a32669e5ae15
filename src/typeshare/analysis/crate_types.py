"""
Cross-Unit Type Index

Rust Pattern: typeshare_core::language::{CrateTypes, ScopedCrateTypes}

Built from the merged per-crate models after parsing: which type names each
crate defines. Backends use it, together with one crate's ImportedType set,
to decide which imports a generated file needs.

The index is derived data. Rebuild it whenever the mapping changes.
"""

import logging
from typing import Dict, FrozenSet, List, Mapping

from ..ir.nodes import ParsedData
from ..utils.config import WILDCARD_TYPE_NAME

logger = logging.getLogger("typeshare.analysis.crate_types")

CrateTypes = Dict[str, FrozenSet[str]]
ScopedCrateTypes = Dict[str, List[str]]


def all_types(mapping: Mapping[str, ParsedData]) -> CrateTypes:
    """Crate name -> every struct, enum and alias name it defines."""
    return {
        crate_name: frozenset(parsed.type_names)
        for crate_name, parsed in mapping.items()
    }


def used_imports(parsed: ParsedData, crate_types: Mapping[str, FrozenSet[str]]) -> ScopedCrateTypes:
    """
    Scope one crate's referenced types to what other crates actually define.

    - references into the crate itself are dropped
    - a glob (`other::*`) expands to every type the other crate defines
    - a reference to a crate typeshare did not see, or to a name the
      referenced crate does not define, falls back to every other crate
      defining a type of that name (the type may be re-exported)

    Returns crate name -> sorted type names, ordered by crate name.
    """
    scoped: Dict[str, set] = {}
    for imported in parsed.import_types:
        base = imported.base_crate
        if base == parsed.crate_name:
            continue

        if base in crate_types:
            if imported.type_name == WILDCARD_TYPE_NAME:
                if crate_types[base]:
                    scoped.setdefault(base, set()).update(crate_types[base])
                continue
            if imported.type_name in crate_types[base]:
                scoped.setdefault(base, set()).add(imported.type_name)
                continue

        if imported.type_name == WILDCARD_TYPE_NAME:
            continue
        # `base` re-exports the type or is not a typeshared crate
        for crate_name, names in crate_types.items():
            if crate_name != parsed.crate_name and imported.type_name in names:
                scoped.setdefault(crate_name, set()).add(imported.type_name)

    if scoped:
        logger.debug(f"{parsed.crate_name}: imports from {', '.join(sorted(scoped))}")
    return {crate_name: sorted(scoped[crate_name]) for crate_name in sorted(scoped)}
