"""Bridge to the Node toolchain used to ship the TypeScript SDK to the browser.

Three steps run against the generated TypeScript directory, in order:
``ensure_package_json`` (manifest), ``ensure_npm_dependencies`` (npm) and
``bundle_with_esbuild`` (single ES module at ``<root>/sdk.js``).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import orjson

from .errors import NoEntryPointError
from .runner import ProcessRunner
from .schema import PackageManifest

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
PACKAGE_LOCK = "package-lock.json"
NODE_MODULES = "node_modules"
NPM_FLAGS = ["--no-audit", "--no-fund"]

ESBUILD_FLAGS = [
    "--bundle",
    "--format=esm",
    "--platform=browser",
    "--target=es2020",
    "--minify",
    "--tree-shaking=true",
]


def render_package_json(sdk_name: str) -> str:
    manifest = PackageManifest.for_sdk(sdk_name)
    return orjson.dumps(manifest.model_dump(), option=orjson.OPT_INDENT_2).decode("utf-8")


def ensure_package_json(ts_path: Path, sdk_name: str) -> bool:
    """Write package.json unless identical content is already there.

    Leaving the file alone keeps its mtime, which ``npm_install_command``
    compares against the lock file. Returns True when the file was written.
    """
    path = Path(ts_path) / PACKAGE_JSON
    content = render_package_json(sdk_name)
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return False
    path.write_text(content, encoding="utf-8")
    return True


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return 0.0


def npm_install_command(ts_path: Path) -> Optional[List[str]]:
    """Pick the npm invocation for ``ts_path``, or None when nothing is needed.

    A lock file at least as new as package.json with node_modules in place
    means the install is current. Otherwise ``npm ci`` when a lock file
    exists, ``npm install`` when it does not.
    """
    ts_path = Path(ts_path)
    lock = ts_path / PACKAGE_LOCK
    if lock.is_file() and (ts_path / NODE_MODULES).is_dir():
        if _mtime(lock) >= _mtime(ts_path / PACKAGE_JSON):
            return None
    command = "ci" if lock.is_file() else "install"
    return [command, *NPM_FLAGS]


async def ensure_npm_dependencies(runner: ProcessRunner, ts_path: Path) -> None:
    args = npm_install_command(ts_path)
    if args is None:
        logger.debug("NPM dependencies are up-to-date")
        return
    logger.info("Installing NPM dependencies...")
    await runner.run("npm", args, cwd=str(ts_path))


def find_entry_point(ts_path: Path) -> Path:
    candidates = sorted(
        p for p in Path(ts_path).iterdir()
        if p.is_file() and p.name.endswith(".ts") and not p.name.endswith(".d.ts")
    )
    if not candidates:
        raise NoEntryPointError(str(ts_path))
    return candidates[0]


async def bundle_with_esbuild(runner: ProcessRunner, ts_path: Path, output_path: Path) -> None:
    entry = find_entry_point(ts_path)
    logger.info("Bundling TypeScript SDK...")
    await runner.run(
        "npx",
        ["--yes", "esbuild", str(entry), *ESBUILD_FLAGS, f"--outfile={output_path}"],
        cwd=str(ts_path),
    )


__all__ = [
    "render_package_json",
    "ensure_package_json",
    "npm_install_command",
    "ensure_npm_dependencies",
    "find_entry_point",
    "bundle_with_esbuild",
]
