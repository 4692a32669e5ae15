"""typeshare: generate Kotlin, Swift and TypeScript types from Rust definitions."""

from .utils.config import TYPESHARE_VERSION

__version__ = TYPESHARE_VERSION
