"""Small helpers for language identifiers and package names."""

BUNDLE_LANGUAGE = "TypeScript"


def language_dir_name(language: str) -> str:
    """Directory name used for a language's generator output."""
    return language.lower()


def is_bundle_language(language: str) -> bool:
    return language.lower() == BUNDLE_LANGUAGE.lower()


def package_name(sdk_name: str) -> str:
    """npm package name for an SDK: lower-cased, spaces become hyphens.

    >>> package_name("My SDK Name")
    'my-sdk-name'
    """
    return sdk_name.lower().replace(" ", "-")
