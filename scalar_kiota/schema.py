from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import package_name


class ScalarTheme(str, Enum):
    DEFAULT = "default"
    ALTERNATE = "alternate"
    MOON = "moon"
    PURPLE = "purple"
    SOLARIZED = "solarized"
    BLUE_PLANET = "bluePlanet"
    SATURN = "saturn"
    KEPLER = "kepler"
    MARS = "mars"
    DEEP_SPACE = "deepSpace"
    LASERWAVE = "laserwave"
    NONE = "none"


class GenerationOptions(BaseModel):
    """Snapshot of the SDK generation settings, fixed at startup.

    The ``with_*`` helpers return modified copies so options can still be
    built fluently.
    """
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None  # None -> "{app title} API"
    theme: ScalarTheme = ScalarTheme.SATURN
    sdk_name: str = "ApiClient"
    languages: Tuple[str, ...] = ("TypeScript",)
    output_path: Optional[str] = None  # None -> <content root>/static/.scalar-kiota
    bundle_typescript: bool = True
    open_docs_on_start: bool = False
    docs_route_path: str = "api"

    @field_validator("languages", mode="before")
    @classmethod
    def _keep_default_when_empty(cls, value):
        if isinstance(value, str):
            value = [value] if value else []
        if value is None or (isinstance(value, (list, tuple)) and len(value) == 0):
            return ("TypeScript",)
        if isinstance(value, list):
            return tuple(value)
        return value

    def _replace(self, **changes) -> "GenerationOptions":
        # model_copy(update=...) skips validation
        return self.model_validate({**self.model_dump(), **changes})

    def with_title(self, title: Optional[str]) -> "GenerationOptions":
        return self._replace(title=title)

    def with_theme(self, theme: ScalarTheme) -> "GenerationOptions":
        return self._replace(theme=theme)

    def with_sdk_name(self, name: str) -> "GenerationOptions":
        return self._replace(sdk_name=name)

    def with_languages(self, *languages: str) -> "GenerationOptions":
        """Replace the language list; no languages leaves it unchanged.

        Accepts either several names or a single list of names.
        """
        if len(languages) == 1 and isinstance(languages[0], (list, tuple)):
            languages = tuple(languages[0])
        if not languages:
            return self
        return self._replace(languages=tuple(languages))

    def with_output_path(self, path: str) -> "GenerationOptions":
        return self._replace(output_path=path)


KIOTA_RUNTIME_VERSION = "^1.0.0-preview.96"
KIOTA_RUNTIME_PACKAGES = (
    "@microsoft/kiota-abstractions",
    "@microsoft/kiota-http-fetchlibrary",
    "@microsoft/kiota-serialization-json",
    "@microsoft/kiota-serialization-text",
    "@microsoft/kiota-serialization-form",
    "@microsoft/kiota-serialization-multipart",
)


class PackageManifest(BaseModel):
    """package.json written next to the generated TypeScript client."""
    name: str
    version: str = "1.0.0"
    type: str = "module"
    private: bool = True
    dependencies: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def for_sdk(cls, sdk_name: str) -> "PackageManifest":
        return cls(
            name=package_name(sdk_name),
            dependencies={pkg: KIOTA_RUNTIME_VERSION for pkg in KIOTA_RUNTIME_PACKAGES},
        )


class GenerationResult(BaseModel):
    spec_hash: str
    regenerated: bool
    languages: Tuple[str, ...] = ()
    duration_s: float = 0.0
