"""Build tag JSON artifact shared with the distribution steps."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from ..errors import BuildTagFileError
from ..models import BuildTag

STUB_COMMIT_SHA = "STUB COMMIT SHA"
STUB_TAG_MESSAGE = "WARNING: Not real tag, not use it for release"
DEFAULT_BUILD_VERSION = "0.0"
DEFAULT_BUILD_NUMBER = 1

_REQUIRED_STRINGS = ("name", "commitSha", "buildVersion", "buildVariant")


def build_tag_to_dict(tag: BuildTag) -> Dict[str, Any]:
    return {
        "name": tag.name,
        "commitSha": tag.commit_sha,
        "message": tag.message,
        "buildVersion": tag.build_version,
        "buildVariant": tag.build_variant,
        "buildNumber": tag.build_number,
    }


def build_tag_from_dict(payload: Any, *, source: str = "payload") -> BuildTag:
    if not isinstance(payload, dict):
        raise BuildTagFileError(
            f"{source} can't be parsed: it has wrong data or a different object"
        )
    for key in _REQUIRED_STRINGS:
        if not isinstance(payload.get(key), str):
            raise BuildTagFileError(f"{key} not found in {source}")
    number = payload.get("buildNumber")
    # bool is an int subclass; reject it explicitly
    if not isinstance(number, int) or isinstance(number, bool):
        raise BuildTagFileError(f"buildNumber not found in {source}")
    message = payload.get("message")
    return BuildTag(
        name=payload["name"],
        commit_sha=payload["commitSha"],
        message=message if isinstance(message, str) else None,
        build_version=payload["buildVersion"],
        build_variant=payload["buildVariant"],
        build_number=number,
    )


def write_build_tag_file(tag: BuildTag, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_tag_to_dict(tag), indent=2), encoding="utf-8")
    return path


def read_build_tag_file(path: Path) -> BuildTag:
    if not path.is_file():
        raise BuildTagFileError(f"Build tag file {path} does not exist")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise BuildTagFileError(f"Build tag file {path} is not valid JSON: {exc}") from exc
    return build_tag_from_dict(payload, source=str(path))


def stub_build_tag(pattern: str, build_variant: str) -> BuildTag:
    """Placeholder tag used when no real tag exists and stubs are allowed."""
    return BuildTag(
        name=pattern,
        commit_sha=STUB_COMMIT_SHA,
        message=STUB_TAG_MESSAGE,
        build_version=DEFAULT_BUILD_VERSION,
        build_variant=build_variant,
        build_number=DEFAULT_BUILD_NUMBER,
    )


def next_build_tag_name(tag: BuildTag) -> str:
    """Return the tag name with its build number incremented.

    Only the part before the first ``-`` is searched, so digits inside the
    variant name (``armv8``) are never touched.
    """
    current = str(tag.build_number)
    head = tag.name.split("-", 1)[0]
    index = head.rfind(current)
    if index < 0:
        return tag.name
    return tag.name[:index] + str(tag.build_number + 1) + tag.name[index + len(current):]


__all__ = [
    "DEFAULT_BUILD_NUMBER",
    "DEFAULT_BUILD_VERSION",
    "STUB_COMMIT_SHA",
    "STUB_TAG_MESSAGE",
    "build_tag_from_dict",
    "build_tag_to_dict",
    "next_build_tag_name",
    "read_build_tag_file",
    "stub_build_tag",
    "write_build_tag_file",
]
