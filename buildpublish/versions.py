"""Version name, version code and release name derivation from build tags."""

from __future__ import annotations

from typing import Optional

from .models import BuildTag
from .tags.serialization import DEFAULT_BUILD_NUMBER, DEFAULT_BUILD_VERSION

DEFAULT_VERSION_NAME = f"{DEFAULT_BUILD_VERSION}.{DEFAULT_BUILD_NUMBER}"
DEFAULT_VERSION_CODE = DEFAULT_BUILD_NUMBER


def version_name(tag: Optional[BuildTag]) -> str:
    if tag is None:
        return DEFAULT_VERSION_NAME
    if not tag.build_version:
        return str(tag.build_number)
    return f"{tag.build_version}.{tag.build_number}"


def version_code(tag: Optional[BuildTag]) -> int:
    return tag.build_number if tag is not None else DEFAULT_VERSION_CODE


def release_name(base_name: str, tag: BuildTag) -> str:
    """Label used by distribution steps, e.g. ``app(1.2.45)``."""
    return f"{base_name}({version_name(tag)})"


def output_file_name(base_name: str, tag: Optional[BuildTag], extension: str = "apk") -> str:
    """Artifact file name carrying the tag, e.g. ``app-cabinet+1.2.45-armv8Debug.apk``."""
    suffix = extension.lstrip(".")
    if tag is None:
        return f"{base_name}.{suffix}"
    return f"{base_name}-{tag.name}.{suffix}"


__all__ = [
    "DEFAULT_VERSION_CODE",
    "DEFAULT_VERSION_NAME",
    "output_file_name",
    "release_name",
    "version_code",
    "version_name",
]
