"""
Typeshare Driver

Rust Pattern: typeshare_cli::main

Orchestrates one generation run:

1. discover inputs   (pipeline.parser_inputs)
2. parse and merge   (pipeline.parse_input, pipeline.check_parse_errors)
3. index             (crate_types.all_types)
4. render each crate (backend.generate_types), in memory
5. write files       (only after every crate rendered)

Any failure aborts the run before a single file is written.
"""

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ..analysis.crate_types import CrateTypes, all_types, used_imports
from ..backends import BackendConfig, SupportedLanguage, create_backend
from ..frontend.parser import Parser, default_parser
from ..ir.nodes import ParsedData
from ..utils.config import DEFAULT_WORKER_COUNT, SINGLE_FILE_CRATE_NAME
from ..utils.io_utils import write_output_file
from .pipeline import check_parse_errors, parse_input, parser_inputs

logger = logging.getLogger("typeshare.compiler.driver")


@dataclass
class GenerationResult:
    """Output path -> generated text, in write order."""
    outputs: Dict[Path, str] = field(default_factory=dict)

    @property
    def files(self) -> Tuple[Path, ...]:
        return tuple(self.outputs)


class TypeshareDriver:
    """
    Usage:
        driver = TypeshareDriver(SupportedLanguage.KOTLIN, BackendConfig(package="com.example"))
        driver.generate(["src/"], output_file="Types.kt")
    """

    def __init__(
        self,
        language: Union[SupportedLanguage, str],
        config: Optional[BackendConfig] = None,
        ignored_types: Sequence[str] = (),
        jobs: Optional[int] = None,
        parser: Optional[Parser] = None,
    ):
        self.language = SupportedLanguage(language)
        self.config = config or BackendConfig()
        self.ignored_types = tuple(ignored_types)
        self.jobs = jobs or DEFAULT_WORKER_COUNT
        self.parser = parser or default_parser()

    def generate(
        self,
        sources: Iterable[Union[Path, str]],
        output_file: Optional[Union[Path, str]] = None,
        output_folder: Optional[Union[Path, str]] = None,
    ) -> GenerationResult:
        """Generate and write. An output folder switches on multi-file mode."""
        if (output_file is None) == (output_folder is None):
            raise ValueError("exactly one of output_file and output_folder is required")
        multi_file = output_folder is not None

        mapping = self.parse(sources, multi_file)
        result = self.render(mapping, output_file, output_folder)
        for path, contents in result.outputs.items():
            write_output_file(path, contents)
            logger.debug(f"wrote {path}")
        return result

    def parse(self, sources: Iterable[Union[Path, str]], multi_file: bool) -> Dict[str, ParsedData]:
        inputs = parser_inputs(sources, self.language, multi_file)
        mapping = parse_input(inputs, self.ignored_types, multi_file, self.jobs, self.parser)
        check_parse_errors(mapping)
        return mapping

    def render(
        self,
        mapping: Mapping[str, ParsedData],
        output_file: Optional[Union[Path, str]] = None,
        output_folder: Optional[Union[Path, str]] = None,
    ) -> GenerationResult:
        """Render every crate in memory. Writes nothing."""
        crate_types = all_types(mapping)
        result = GenerationResult()

        if output_folder is None:
            parsed = mapping.get(SINGLE_FILE_CRATE_NAME)
            if parsed is not None:
                result.outputs[Path(output_file)] = self.render_crate(parsed, crate_types)
            return result

        crate_names = sorted(mapping)
        with ThreadPoolExecutor(max_workers=max(1, min(self.jobs, len(crate_names) or 1))) as pool:
            rendered = list(pool.map(lambda name: self.render_crate(mapping[name], crate_types), crate_names))
        for name, text in zip(crate_names, rendered):
            result.outputs[Path(output_folder) / mapping[name].file_name] = text
        return result

    def render_crate(self, parsed: ParsedData, crate_types: CrateTypes) -> str:
        backend = create_backend(self.language, self.config)
        out = io.StringIO()
        backend.generate_types(out, used_imports(parsed, crate_types), parsed)
        return out.getvalue()
