"""Changelog extraction, assembly and destination rendering."""

from .builder import ChangelogBuilder, DefaultValueSupplier
from .extractor import BULLET, CommitMessageExtractor
from .render import RenderOptions, render_changelog, render_messages

__all__ = [
    "BULLET",
    "ChangelogBuilder",
    "CommitMessageExtractor",
    "DefaultValueSupplier",
    "RenderOptions",
    "render_changelog",
    "render_messages",
]
