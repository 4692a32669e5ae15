"""
Code generation backends.
"""

from typing import Dict, Optional, Type, Union

from .base import BackendConfig, Language, SupportedLanguage
from .kotlin import Kotlin
from .swift import Swift
from .typescript import TypeScript

BACKENDS: Dict[SupportedLanguage, Type[Language]] = {
    SupportedLanguage.KOTLIN: Kotlin,
    SupportedLanguage.SWIFT: Swift,
    SupportedLanguage.TYPESCRIPT: TypeScript,
}


def create_backend(
    language: Union[SupportedLanguage, str],
    config: Optional[BackendConfig] = None,
) -> Language:
    """Fresh backend instance for one render."""
    return BACKENDS[SupportedLanguage(language)](config)


__all__ = [
    "BACKENDS",
    "BackendConfig",
    "Language",
    "SupportedLanguage",
    "Kotlin",
    "Swift",
    "TypeScript",
    "create_backend",
]
