"""Typer CLI for triggering SDK generation by hand."""
import asyncio
import logging
from typing import List, Optional

import typer
import yaml
from dotenv import load_dotenv

from .cache import spec_hash
from .config import load_options, server_addresses
from .errors import ScalarKiotaError
from .generator import SdkGenerator

# APP_URLS / SCALAR_KIOTA_CONFIG may come from a .env file
load_dotenv()

app = typer.Typer(add_completion=False)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Raised while reading options: missing file, bad YAML, invalid values
# (pydantic.ValidationError is a ValueError).
CONFIG_ERRORS = (OSError, ValueError, yaml.YAMLError)


def _fail(e: Exception) -> None:
    typer.secho(str(e), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _build_generator(config, server_url, output, languages, sdk_name, bundle, open_docs) -> SdkGenerator:
    options = load_options(
        config,
        output_path=output,
        languages=languages or None,
        sdk_name=sdk_name,
        bundle_typescript=bundle,
        open_docs_on_start=open_docs,
    )
    addresses = [server_url] if server_url else server_addresses()
    return SdkGenerator(options, addresses=addresses)


@app.command()
def generate(
    config: Optional[str] = typer.Option(None, help="Options YAML file (default: scalar-kiota.yaml if present)."),
    server_url: Optional[str] = typer.Option(None, help="Base URL of the running API (default: APP_URLS or http://localhost:5000)."),
    output: Optional[str] = typer.Option(None, help="Output directory for generated SDKs."),
    language: Optional[List[str]] = typer.Option(None, "--language", "-l", help="Target language; repeat for several."),
    sdk_name: Optional[str] = typer.Option(None, help="Client class and namespace name."),
    bundle: Optional[bool] = typer.Option(None, "--bundle/--no-bundle", help="Bundle the TypeScript SDK with esbuild."),
    open_docs: Optional[bool] = typer.Option(None, "--open-docs/--no-open-docs", help="Open the docs page afterwards."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    """Regenerate SDKs if the API's OpenAPI document changed since the last run."""
    _configure_logging(verbose)
    try:
        gen = _build_generator(config, server_url, output, language, sdk_name, bundle, open_docs)
    except CONFIG_ERRORS as e:
        _fail(e)
    try:
        result = asyncio.run(gen.generate_if_needed())
    except ScalarKiotaError as e:
        _fail(e)
    if result.regenerated:
        typer.echo(f"Generated {', '.join(result.languages)} SDK(s) in {gen.root_path} ({result.duration_s:.1f}s)")
    else:
        typer.echo(f"SDKs are up-to-date in {gen.root_path}")


@app.command()
def status(
    config: Optional[str] = typer.Option(None, help="Options YAML file."),
    server_url: Optional[str] = typer.Option(None, help="Base URL of the running API."),
    output: Optional[str] = typer.Option(None, help="Output directory for generated SDKs."),
):
    """Report whether the cached SDKs match the API's current OpenAPI document."""
    try:
        gen = _build_generator(config, server_url, output, None, None, None, None)
    except CONFIG_ERRORS as e:
        _fail(e)
    try:
        content = asyncio.run(gen.download_spec())
    except ScalarKiotaError as e:
        _fail(e)
    current = spec_hash(content)
    typer.echo(f"Spec hash: {current}")
    if gen.is_cached_and_valid(current):
        typer.echo("Cache: up-to-date")
    else:
        typer.echo("Cache: stale")


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
