"""SDK generation & caching layer.

One call to :meth:`SdkGenerator.generate_if_needed` downloads the host's
OpenAPI document, fingerprints it and regenerates every configured SDK when
the cache in the output root is stale. Steps run strictly one after another
and nothing is retried; a failure aborts the run and leaves the rest for the
next start.

The new spec and fingerprint are written *before* generation starts. If a
language then fails, the fingerprint already matches but that language's
artifact is missing, so :func:`~scalar_kiota.cache.is_cache_valid` still
reports a miss on the next run.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

import httpx

from .cache import CachePaths, is_cache_valid, spec_hash
from .config import default_output_root, resolve_server_url
from .errors import SpecUnavailableError
from .node_bridge import bundle_with_esbuild, ensure_npm_dependencies, ensure_package_json
from .runner import ProcessRunner
from .schema import GenerationOptions, GenerationResult
from .templates import render_loader_config
from .utils import is_bundle_language

logger = logging.getLogger(__name__)

OPENAPI_ROUTE = "/openapi/v1.json"
KIOTA = "kiota"
KIOTA_PACKAGE = "Microsoft.OpenApi.Kiota"
SPEC_TIMEOUT_S = 30.0


class SdkGenerator:
    def __init__(
        self,
        options: GenerationOptions,
        *,
        content_root: Optional[str] = None,
        addresses: Optional[Sequence[str]] = None,
        runner: Optional[ProcessRunner] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.options = options
        self.content_root = content_root
        self.addresses = list(addresses or [])
        self.runner = runner or ProcessRunner()
        self.http_client = http_client

    @property
    def root_path(self) -> Path:
        if self.options.output_path:
            return Path(self.options.output_path)
        return default_output_root(self.content_root)

    @property
    def paths(self) -> CachePaths:
        return CachePaths(self.root_path)

    @property
    def server_url(self) -> str:
        return resolve_server_url(self.addresses)

    def sdk_path(self, language: str) -> Path:
        return self.paths.sdk_dir(language)

    async def generate_if_needed(self) -> GenerationResult:
        start = time.time()
        self.root_path.mkdir(parents=True, exist_ok=True)

        content = await self.download_spec()
        current = spec_hash(content)

        if self.is_cached_and_valid(current):
            logger.info("SDKs are up-to-date")
            regenerated = False
        else:
            paths = self.paths
            paths.spec.write_text(content, encoding="utf-8")
            paths.hash.write_text(current, encoding="utf-8")

            await self.ensure_kiota_installed()
            for language in self.options.languages:
                await self.generate_sdk(language)
            self.ensure_config_file()

            logger.info("SDK generation completed")
            regenerated = True

        if self.options.open_docs_on_start:
            self.open_docs()

        return GenerationResult(
            spec_hash=current,
            regenerated=regenerated,
            languages=self.options.languages,
            duration_s=time.time() - start,
        )

    async def download_spec(self) -> str:
        url = f"{self.server_url}{OPENAPI_ROUTE}"
        try:
            if self.http_client is not None:
                resp = await self.http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=SPEC_TIMEOUT_S) as client:
                    resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SpecUnavailableError(url, str(e)) from e
        return resp.text

    def is_cached_and_valid(self, current_hash: str) -> bool:
        return is_cache_valid(
            self.paths,
            current_hash,
            self.options.languages,
            self.options.bundle_typescript,
        )

    async def ensure_kiota_installed(self) -> None:
        version = await self.runner.execute(KIOTA, ["--version"])
        if version.ok:
            return
        logger.warning("Installing Kiota CLI...")
        await self.runner.run("dotnet", ["tool", "install", "-g", KIOTA_PACKAGE])

    async def generate_sdk(self, language: str) -> None:
        output_dir = self.sdk_path(language)
        name = self.options.sdk_name
        await self.runner.run(KIOTA, [
            "generate",
            "--openapi", str(self.paths.spec),
            "--language", language,
            "--class-name", name,
            "--namespace-name", name,
            "--output", str(output_dir),
            "--clean-output",
            "--exclude-backward-compatible",
        ])
        if is_bundle_language(language) and self.options.bundle_typescript:
            await self.bundle_typescript(output_dir)

    async def bundle_typescript(self, ts_path: Path) -> None:
        ensure_package_json(ts_path, self.options.sdk_name)
        await ensure_npm_dependencies(self.runner, ts_path)
        await bundle_with_esbuild(self.runner, ts_path, self.paths.bundle)

    def ensure_config_file(self) -> bool:
        """Write config.js if missing. An existing file is never touched."""
        path = self.paths.config
        if path.exists():
            return False
        path.write_text(render_loader_config(self.options.sdk_name), encoding="utf-8")
        return True

    def docs_url(self) -> str:
        return f"{self.server_url}/{self.options.docs_route_path.lstrip('/')}"

    def open_docs(self) -> None:
        url = self.docs_url()
        try:
            self.runner.open_url(url)
        except Exception:
            logger.warning("Failed to open documentation at %s", url, exc_info=True)


__all__ = ["SdkGenerator", "OPENAPI_ROUTE"]
