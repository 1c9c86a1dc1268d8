"""Build tag patterns, parsing, resolution and persistence."""

from .parser import build_number, build_version, to_build_tag
from .pattern import (
    DEFAULT_TAG_PATTERN,
    BuildTagPatternBuilder,
    compile_build_tag_regex,
    extract_build_number,
    validate_build_tag_pattern,
)
from .resolver import TagRangeResolver
from .serialization import (
    next_build_tag_name,
    read_build_tag_file,
    stub_build_tag,
    write_build_tag_file,
)

__all__ = [
    "DEFAULT_TAG_PATTERN",
    "BuildTagPatternBuilder",
    "TagRangeResolver",
    "build_number",
    "build_version",
    "compile_build_tag_regex",
    "extract_build_number",
    "next_build_tag_name",
    "read_build_tag_file",
    "stub_build_tag",
    "to_build_tag",
    "validate_build_tag_pattern",
    "write_build_tag_file",
]
