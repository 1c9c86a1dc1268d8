"""Configuration loading for buildpublish (.buildpublish.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import TagPatternError
from .tags.pattern import DEFAULT_TAG_PATTERN, validate_build_tag_pattern

CONFIG_FILE_NAME = ".buildpublish.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class ChangelogConfig:
    """Commit message key and issue tracker settings."""

    commit_message_key: Optional[str] = None
    issue_number_pattern: Optional[str] = None
    issue_url_prefix: Optional[str] = None


@dataclass
class TagConfig:
    """Build tag pattern settings."""

    build_tag_pattern: str = DEFAULT_TAG_PATTERN
    use_stub_as_fallback: bool = False


@dataclass
class OutputConfig:
    """Artifact naming settings."""

    base_file_name: Optional[str] = None


@dataclass
class BuildPublishConfig:
    """Represents the settings defined in .buildpublish.yml."""

    root: Path
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    tags: TagConfig = field(default_factory=TagConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Path) -> BuildPublishConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BuildPublishConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    changelog_data = _as_dict(data.get("changelog"))
    changelog = ChangelogConfig(
        commit_message_key=_as_str(changelog_data.get("commit_message_key")),
        issue_number_pattern=_as_str(changelog_data.get("issue_number_pattern")),
        issue_url_prefix=_as_str(changelog_data.get("issue_url_prefix")),
    )

    tags_data = _as_dict(data.get("tags"))
    tags = TagConfig()
    pattern = _as_str(tags_data.get("build_tag_pattern"))
    if pattern is not None:
        try:
            tags.build_tag_pattern = validate_build_tag_pattern(pattern)
        except TagPatternError as exc:
            raise ConfigError(f"Invalid tags.build_tag_pattern in {config_file.name}: {exc}") from exc
    tags.use_stub_as_fallback = _as_bool(tags_data.get("use_stub_as_fallback")) or False

    output_data = _as_dict(data.get("output"))
    output = OutputConfig(base_file_name=_as_str(output_data.get("base_file_name")))

    return BuildPublishConfig(root=root, changelog=changelog, tags=tags, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILE_NAME",
    "BuildPublishConfig",
    "ChangelogConfig",
    "ConfigError",
    "OutputConfig",
    "TagConfig",
    "load_config",
]
