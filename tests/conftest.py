"""
Pytest configuration and shared fixtures for all typeshare tests.

The Lark parser is the expensive object (LALR table construction), so one
instance is shared by the whole session. It keeps no per-parse state.
"""

import io
import sys
from pathlib import Path
from typing import Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from typeshare.backends import BackendConfig, create_backend
from typeshare.frontend import lowering
from typeshare.frontend.parser import Parser
from typeshare.ir.nodes import ParsedData


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser instance shared across ALL tests."""
    return Parser()


@pytest.fixture(scope="class")
def parser(session_parser):
    """Class-scoped parser - returns session parser (stateless, safe to share)."""
    return session_parser


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture(scope="session")
def parse_rust(session_parser):
    """
    Factory fixture: Rust source -> ParsedData for one file.

    Fails the test if the source does not mention typeshare at all.
    """
    def _parse_rust(
        source: str,
        crate_name: str = "my_crate",
        file_name: str = "lib.rs",
        ignored_types=(),
        multi_file: bool = False,
    ) -> ParsedData:
        parsed = lowering.parse(
            source,
            crate_name=crate_name,
            file_name=file_name,
            file_path=file_name,
            ignored_types=ignored_types,
            multi_file=multi_file,
            parser=session_parser,
        )
        assert parsed is not None, "source was skipped: no typeshare marker"
        return parsed

    return _parse_rust


@pytest.fixture(scope="session")
def generate(parse_rust):
    """
    Factory fixture: Rust source -> generated text for one language.

    Single-file mode, no cross-crate imports.
    """
    def _generate(language: str, source: str, config: Optional[BackendConfig] = None) -> str:
        parsed = parse_rust(source)
        assert not parsed.errors, [str(e) for e in parsed.errors]
        backend = create_backend(language, config or BackendConfig(no_version_header=True))
        out = io.StringIO()
        backend.generate_types(out, {}, parsed)
        return out.getvalue()

    return _generate


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
