"""
Configuration constants shared across typeshare.

Process-wide, read-only data. Per-run settings live in
`BackendConfig` and the driver arguments instead.
"""

import os

TYPESHARE_VERSION = "1.0.0"

# Attribute that marks a Rust item for generation
TYPESHARE_ATTRIBUTE = "typeshare"

# Crate name used for every file when generating a single output file
SINGLE_FILE_CRATE_NAME = "SINGLE_FILE_CRATE_NAME"

# Source discovery
SOURCE_FILE_EXTENSION = ".rs"
CARGO_MANIFEST = "Cargo.toml"
SKIPPED_DIRECTORIES = frozenset({"target", ".git"})

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Lark grammar analysis cache (True = temp file keyed by grammar hash)
PARSER_CACHE = True

# Worker pool size for the parse stage
DEFAULT_WORKER_COUNT = min(32, (os.cpu_count() or 1) + 4)

# Root crates that never contribute shared types
IGNORED_BASE_CRATES = frozenset({
    "std",
    "serde",
    "serde_json",
    "typeshare",
    "once_cell",
    "itertools",
    "anyhow",
    "thiserror",
    "syn",
    "clap",
    "tokio",
    "reqwest",
    "regex",
    "http",
    "time",
    "axum",
    "either",
    "chrono",
    "base64",
    "rayon",
    "ring",
    "zip",
    "neon",
})

# Path roots that refer to the crate being parsed
SELF_CRATE_ALIASES = frozenset({"crate", "super"})

# Glob import marker
WILDCARD_TYPE_NAME = "*"

