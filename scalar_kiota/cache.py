"""Cache state for generated SDK artifacts.

The output root holds the last downloaded spec, its fingerprint and the
generated SDKs. A fingerprint match alone does not make the cache valid: every
configured language must also have its artifact on disk, so a run that died
halfway through generation is redone on the next start.
"""
from __future__ import annotations

import base64
import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .utils import is_bundle_language, language_dir_name

logger = logging.getLogger(__name__)

OUTPUT_DIRNAME = ".scalar-kiota"
SPEC_FILENAME = "openapi.json"
HASH_FILENAME = ".spec.hash"
CONFIG_FILENAME = "config.js"
BUNDLE_FILENAME = "sdk.js"


def spec_hash(content: str) -> str:
    """Return the base64 SHA-256 fingerprint of ``content``."""
    return base64.b64encode(hashlib.sha256(content.encode("utf-8")).digest()).decode("ascii")


@dataclass(frozen=True)
class CachePaths:
    root: Path

    @property
    def spec(self) -> Path:
        return self.root / SPEC_FILENAME

    @property
    def hash(self) -> Path:
        return self.root / HASH_FILENAME

    @property
    def config(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def bundle(self) -> Path:
        return self.root / BUNDLE_FILENAME

    def sdk_dir(self, language: str) -> Path:
        return self.root / language_dir_name(language)


def _has_files(directory: Path) -> bool:
    if not directory.is_dir():
        return False
    return any(p.is_file() for p in directory.rglob("*"))


def artifact_present(paths: CachePaths, language: str, bundle_typescript: bool = True) -> bool:
    """Check that a language's generated output exists on disk."""
    if bundle_typescript and is_bundle_language(language):
        return paths.bundle.is_file()
    return _has_files(paths.sdk_dir(language))


def is_cache_valid(
    paths: CachePaths,
    current_hash: str,
    languages: Iterable[str],
    bundle_typescript: bool = True,
) -> bool:
    if not paths.hash.is_file() or not paths.config.is_file():
        return False
    if paths.hash.read_text(encoding="utf-8") != current_hash:
        return False
    for language in languages:
        if not artifact_present(paths, language, bundle_typescript):
            logger.debug("Missing generated output for %s", language)
            return False
    return True


__all__ = [
    "OUTPUT_DIRNAME",
    "CachePaths",
    "spec_hash",
    "artifact_present",
    "is_cache_valid",
]
