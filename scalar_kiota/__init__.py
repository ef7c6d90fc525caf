"""scalar_kiota

Development helper for FastAPI hosts: regenerates Kiota client SDKs whenever
the app's OpenAPI document changes and serves a Scalar documentation page
that loads the bundled TypeScript SDK.

Primary entrypoints:
 - hosting.py (add_scalar_with_kiota / map_scalar_with_kiota)
 - generator.py (spec download, cache check, SDK generation)
 - node_bridge.py (package.json, npm install, esbuild bundling)
 - cli.py (Typer CLI for manual runs)
"""

from .errors import ExternalToolError, NoEntryPointError, ScalarKiotaError, SpecUnavailableError
from .generator import SdkGenerator
from .hosting import SdkGenerationService, add_scalar_with_kiota, map_scalar_with_kiota
from .schema import GenerationOptions, ScalarTheme

__all__ = [
    "GenerationOptions",
    "ScalarTheme",
    "SdkGenerator",
    "SdkGenerationService",
    "add_scalar_with_kiota",
    "map_scalar_with_kiota",
    "ScalarKiotaError",
    "SpecUnavailableError",
    "ExternalToolError",
    "NoEntryPointError",
]
