"""
Parse-and-Merge Pipeline

Rust Pattern: typeshare_cli::parse (rayon try_fold / try_reduce)

Turns a set of source paths into one ParsedData per crate:

1. parser_inputs: walk the paths, attach crate and output file names
2. parse_input:   shard the inputs over a worker pool; each worker reads,
                  parses and folds its shard into a local crate -> data map
3. merge:         shard maps are reduced with the same merge as the fold

The merge appends sequences and unions sets, so the set projections of the
result do not depend on how inputs were sharded or in which order shards
finished. The first read or parse failure cancels the run; nothing partial
is returned.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from ..backends.base import SupportedLanguage
from ..frontend import lowering
from ..frontend.parser import Parser, default_parser
from ..ir.nodes import ParsedData
from ..shared.errors import ParseError
from ..utils.config import (
    CARGO_MANIFEST,
    DEFAULT_WORKER_COUNT,
    SINGLE_FILE_CRATE_NAME,
    SKIPPED_DIRECTORIES,
    SOURCE_FILE_EXTENSION,
)
from ..utils.io_utils import read_source_file
from ..utils.rename import to_pascal_case

logger = logging.getLogger("typeshare.compiler.pipeline")

CrateMapping = Dict[str, ParsedData]


@dataclass(frozen=True)
class ParserInput:
    """One source file to parse."""
    file_path: Path
    file_name: str   # output file the crate is written to
    crate_name: str


# ============================================================================
# Input enumeration
# ============================================================================

def find_crate_name(path: Union[Path, str]) -> Optional[str]:
    """
    Name of the crate a file belongs to: the directory of the nearest
    ancestor holding a Cargo.toml, with `-` replaced by `_`.
    """
    current = Path(path).resolve()
    for candidate in (current, *current.parents):
        if (candidate / CARGO_MANIFEST).is_file():
            return candidate.name.replace("-", "_")
    return None


def walk_source_files(paths: Iterable[Union[Path, str]]) -> Iterator[Path]:
    """
    Every Rust source file under `paths`, in a stable order.

    Paths naming a file are yielded as given. Build output and VCS
    directories are not descended into.
    """
    for root in paths:
        root = Path(root)
        if root.is_file():
            yield root
            continue
        if not root.is_dir():
            logger.warning(f"skipping {root}: no such file or directory")
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRECTORIES)
            for name in sorted(filenames):
                if name.endswith(SOURCE_FILE_EXTENSION):
                    yield Path(dirpath) / name


def output_file_name(language: SupportedLanguage, crate_name: str) -> str:
    """Swift module files are PascalCase; every other language keeps the crate name."""
    extension = language.language_extension()
    if language is SupportedLanguage.SWIFT:
        return f"{to_pascal_case(crate_name)}.{extension}"
    return f"{crate_name}.{extension}"


def parser_inputs(
    paths: Iterable[Union[Path, str]],
    language: SupportedLanguage,
    multi_file: bool,
) -> List[ParserInput]:
    inputs = []
    for file_path in walk_source_files(paths):
        if multi_file:
            crate_name = find_crate_name(file_path)
            if crate_name is None:
                logger.warning(f"skipping {file_path}: no {CARGO_MANIFEST} found in any parent directory")
                continue
        else:
            crate_name = SINGLE_FILE_CRATE_NAME
        inputs.append(ParserInput(
            file_path=file_path,
            file_name=output_file_name(language, crate_name),
            crate_name=crate_name,
        ))
    logger.debug(f"collected {len(inputs)} input files")
    return inputs


# ============================================================================
# Merge
# ============================================================================

def is_parsed_data_empty(parsed: ParsedData) -> bool:
    """True when a file contributed no aliases, structs, enums or errors."""
    return parsed.is_empty()


def _copy(parsed: ParsedData) -> ParsedData:
    return ParsedData(
        crate_name=parsed.crate_name,
        file_name=parsed.file_name,
        structs=list(parsed.structs),
        enums=list(parsed.enums),
        aliases=list(parsed.aliases),
        errors=list(parsed.errors),
        import_types=set(parsed.import_types),
        type_names=set(parsed.type_names),
        multi_file=parsed.multi_file,
    )


def merge_into(target: CrateMapping, crate_name: str, parsed: ParsedData) -> None:
    """Fold one ParsedData into a mapping. Never mutates `parsed`."""
    existing = target.get(crate_name)
    if existing is None:
        target[crate_name] = _copy(parsed)
    else:
        existing.add(parsed)


def merge_mappings(mappings: Iterable[Mapping[str, ParsedData]]) -> CrateMapping:
    """
    Reduce shard results into one mapping.

    Inputs are left untouched, so the same shards can be merged again in a
    different order.
    """
    merged: CrateMapping = {}
    for mapping in mappings:
        for crate_name, parsed in mapping.items():
            merge_into(merged, crate_name, parsed)
    return merged


# ============================================================================
# Parallel parse
# ============================================================================

def parse_file(
    parser_input: ParserInput,
    ignored_types: Sequence[str] = (),
    multi_file: bool = False,
    parser: Optional[Parser] = None,
) -> Optional[ParsedData]:
    """Read and parse one input. Returns None when it contributes nothing."""
    source = read_source_file(parser_input.file_path)
    parsed = lowering.parse(
        source,
        crate_name=parser_input.crate_name,
        file_name=parser_input.file_name,
        file_path=str(parser_input.file_path),
        ignored_types=ignored_types,
        multi_file=multi_file,
        parser=parser,
    )
    if parsed is None or is_parsed_data_empty(parsed):
        return None
    return parsed


def _fold_shard(
    shard: Sequence[ParserInput],
    ignored_types: Sequence[str],
    multi_file: bool,
    parser: Parser,
    cancel: threading.Event,
) -> CrateMapping:
    results: CrateMapping = {}
    for parser_input in shard:
        if cancel.is_set():
            break
        parsed = parse_file(parser_input, ignored_types, multi_file, parser)
        if parsed is not None:
            merge_into(results, parser_input.crate_name, parsed)
    return results


def parse_input(
    inputs: Sequence[ParserInput],
    ignored_types: Sequence[str] = (),
    multi_file: bool = False,
    jobs: Optional[int] = None,
    parser: Optional[Parser] = None,
) -> CrateMapping:
    """
    Parse every input and merge the results by crate.

    Raises the first InputError or ParseError any worker hits. Crates whose
    files contributed nothing do not appear in the result.
    """
    if not inputs:
        return {}
    parser = parser or default_parser()
    jobs = max(1, min(jobs or DEFAULT_WORKER_COUNT, len(inputs)))
    shards = [inputs[i::jobs] for i in range(jobs)]
    cancel = threading.Event()
    logger.debug(f"parsing {len(inputs)} files with {jobs} workers")

    results: List[CrateMapping] = []
    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="typeshare-parse") as pool:
        futures = [
            pool.submit(_fold_shard, shard, ignored_types, multi_file, parser, cancel)
            for shard in shards
        ]
        try:
            for future in as_completed(futures):
                results.append(future.result())
        except Exception:
            cancel.set()
            for future in futures:
                future.cancel()
            raise

    return merge_mappings(results)


def check_parse_errors(mapping: Mapping[str, ParsedData]) -> None:
    """Raise one ParseError listing every item that could not be lowered."""
    errors = [err for crate_name in sorted(mapping) for err in mapping[crate_name].errors]
    if not errors:
        return
    raise ParseError(
        f"{len(errors)} typeshare item(s) could not be generated",
        errors[0].file_name,
        diagnostics=[str(err) for err in errors],
    )
