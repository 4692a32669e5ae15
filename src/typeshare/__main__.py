"""CLI entry point: `typeshare -l kotlin -o Types.kt src/` or `python -m typeshare ...`."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional


def _type_mapping(value: str):
    import argparse

    rust, sep, target = value.partition("=")
    if not sep or not rust or not target:
        raise argparse.ArgumentTypeError(f"expected RUST=TARGET, got {value!r}")
    return rust, target


def _diagnostic_sources(error) -> Dict[str, str]:
    """Source text for the file a diagnostic points into, when it is readable."""
    from .shared.errors import InputError
    from .utils.io_utils import read_source_file

    location = error.location
    if location is None or not location.line:
        return {}
    try:
        return {location.file: read_source_file(location.file)}
    except InputError:
        return {}


def build_arg_parser():
    import argparse
    from .backends import SupportedLanguage
    from .utils.config import TYPESHARE_VERSION

    parser = argparse.ArgumentParser(
        prog="typeshare",
        description="Generate code in other languages from Rust types marked #[typeshare].",
    )
    parser.add_argument("paths", nargs="+", type=Path, metavar="PATH", help="Rust source files or directories")
    parser.add_argument(
        "-l", "--lang", required=True,
        choices=[lang.value for lang in SupportedLanguage],
        help="Target language",
    )
    output = parser.add_mutually_exclusive_group(required=True)
    output.add_argument("-o", "--output-file", type=Path, help="Write every type into one file")
    output.add_argument("-d", "--output-folder", type=Path, help="Write one file per crate (multi-file mode)")
    parser.add_argument("--package", default="", help="Package name for generated code (Kotlin)")
    parser.add_argument("--prefix", default="", help="Prefix for every generated type name")
    parser.add_argument(
        "--type-mapping", action="append", default=[], type=_type_mapping, metavar="RUST=TARGET",
        help="Map a Rust type name to a target type name (repeatable)",
    )
    parser.add_argument(
        "--ignore-type", action="append", default=[], metavar="NAME",
        help="Skip a #[typeshare] type by name (repeatable)",
    )
    parser.add_argument("--no-version-header", action="store_true", help="Omit the generated-by banner")
    parser.add_argument("-j", "--jobs", type=int, default=None, help="Number of parser threads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")
    parser.add_argument("--version", action="version", version=f"typeshare {TYPESHARE_VERSION}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from .backends import BackendConfig
    from .compiler.driver import TypeshareDriver
    from .shared.errors import TypeshareError, format_diagnostic

    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    type_mappings: Dict[str, str] = dict(args.type_mapping)
    config = BackendConfig(
        package=args.package,
        prefix=args.prefix,
        type_mappings=type_mappings,
        no_version_header=args.no_version_header,
    )
    driver = TypeshareDriver(args.lang, config, ignored_types=args.ignore_type, jobs=args.jobs)

    try:
        result = driver.generate(args.paths, output_file=args.output_file, output_folder=args.output_folder)
    except TypeshareError as e:
        sources = _diagnostic_sources(e)
        sys.stderr.write(format_diagnostic(e.diagnostic(), sources, color=sys.stderr.isatty()) + "\n")
        return 1

    if not result.outputs:
        sys.stderr.write("typeshare: warning: no #[typeshare] types found\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
