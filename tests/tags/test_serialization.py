from __future__ import annotations

import json
from pathlib import Path

import pytest

from buildpublish.errors import BuildTagFileError
from buildpublish.models import BuildTag
from buildpublish.tags.pattern import DEFAULT_TAG_PATTERN
from buildpublish.tags.serialization import (
    STUB_COMMIT_SHA,
    STUB_TAG_MESSAGE,
    build_tag_from_dict,
    build_tag_to_dict,
    next_build_tag_name,
    read_build_tag_file,
    stub_build_tag,
    write_build_tag_file,
)


def _build_tag(name: str = "cabinet+1.2.45-armv8Debug", number: int = 45) -> BuildTag:
    return BuildTag(
        name=name,
        commit_sha="0a1b2c",
        message="Sprint 12",
        build_version="1.2",
        build_variant="armv8Debug",
        build_number=number,
    )


def test_build_tag_file_uses_camel_case_keys(tmp_path: Path) -> None:
    path = write_build_tag_file(_build_tag(), tmp_path / "out" / "tag.json")

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload == {
        "name": "cabinet+1.2.45-armv8Debug",
        "commitSha": "0a1b2c",
        "message": "Sprint 12",
        "buildVersion": "1.2",
        "buildVariant": "armv8Debug",
        "buildNumber": 45,
    }
    assert read_build_tag_file(path) == _build_tag()


def test_missing_message_reads_back_as_none() -> None:
    payload = build_tag_to_dict(_build_tag())
    payload["message"] = None

    assert build_tag_from_dict(payload).message is None


@pytest.mark.parametrize("key", ["name", "commitSha", "buildVersion", "buildVariant", "buildNumber"])
def test_missing_required_key_is_reported(key: str) -> None:
    payload = build_tag_to_dict(_build_tag())
    del payload[key]

    with pytest.raises(BuildTagFileError, match=f"{key} not found in tag.json"):
        build_tag_from_dict(payload, source="tag.json")


def test_boolean_build_number_is_rejected() -> None:
    payload = build_tag_to_dict(_build_tag())
    payload["buildNumber"] = True

    with pytest.raises(BuildTagFileError):
        build_tag_from_dict(payload)


def test_read_reports_missing_and_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(BuildTagFileError, match="does not exist"):
        read_build_tag_file(tmp_path / "absent.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(BuildTagFileError, match="not valid JSON"):
        read_build_tag_file(broken)

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(BuildTagFileError, match="can't be parsed"):
        read_build_tag_file(listing)


def test_stub_build_tag_is_marked_as_not_real() -> None:
    stub = stub_build_tag(DEFAULT_TAG_PATTERN, "debug")

    assert stub.name == DEFAULT_TAG_PATTERN
    assert stub.commit_sha == STUB_COMMIT_SHA
    assert stub.message == STUB_TAG_MESSAGE
    assert stub.build_version == "0.0"
    assert stub.build_number == 1


@pytest.mark.parametrize(
    ("name", "number", "expected"),
    [
        ("cabinet+1.2.45-armv8Debug", 45, "cabinet+1.2.46-armv8Debug"),
        ("app.1.0.9-release", 9, "app.1.0.10-release"),
        ("app.7.7.7-debug", 7, "app.7.7.8-debug"),
        ("v3-build3", 3, "v4-build3"),
    ],
)
def test_next_build_tag_name_increments_last_number(name: str, number: int, expected: str) -> None:
    assert next_build_tag_name(_build_tag(name, number)) == expected


def test_next_build_tag_name_without_number_is_unchanged() -> None:
    assert next_build_tag_name(_build_tag("nightly-debug", 4)) == "nightly-debug"
