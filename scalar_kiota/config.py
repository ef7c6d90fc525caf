"""Configuration: host environment, bound addresses and the YAML options file.

Environment variables (a ``.env`` file is honoured by the CLI):
 - APP_ENV: host environment name, ``Development`` enables generation
 - APP_URLS: ``;``-separated addresses the host listens on
 - SCALAR_KIOTA_CONFIG: default options file path
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .cache import OUTPUT_DIRNAME
from .schema import GenerationOptions

DEFAULT_SERVER_URL = "http://localhost:5000"
DEFAULT_WEB_ROOT = "static"
DEFAULT_CONFIG_FILE = "scalar-kiota.yaml"
DEVELOPMENT_NAMES = {"development", "dev"}


def environment_name() -> str:
    return os.environ.get("APP_ENV", "Production")


def is_development(environment: Optional[str] = None) -> bool:
    name = environment if environment is not None else environment_name()
    return name.strip().lower() in DEVELOPMENT_NAMES


def server_addresses() -> List[str]:
    raw = os.environ.get("APP_URLS", "")
    return [a.strip().rstrip("/") for a in raw.split(";") if a.strip()]


def resolve_server_url(addresses: Optional[Sequence[str]] = None) -> str:
    """First bound address, else the default local URL."""
    for address in addresses or []:
        if address:
            return address.rstrip("/")
    return DEFAULT_SERVER_URL


def default_output_root(content_root: Optional[str] = None) -> Path:
    return Path(content_root or os.getcwd()) / DEFAULT_WEB_ROOT / OUTPUT_DIRNAME


def load_options(path: Optional[str] = None, **overrides: Any) -> GenerationOptions:
    """Build options from a YAML file plus explicit overrides.

    A missing default file is fine; a missing explicitly named file is not.
    Overrides that are None are ignored.
    """
    explicit = path is not None
    path = path or os.environ.get("SCALAR_KIOTA_CONFIG", DEFAULT_CONFIG_FILE)
    data: Dict[str, Any] = {}
    cfg = Path(path)
    if cfg.exists():
        with cfg.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{cfg} must contain a mapping of option names to values")
    elif explicit:
        raise FileNotFoundError(f"Options file not found: {cfg}")
    data.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationOptions(**data)


__all__ = [
    "DEFAULT_SERVER_URL",
    "is_development",
    "server_addresses",
    "resolve_server_url",
    "default_output_root",
    "load_options",
]
