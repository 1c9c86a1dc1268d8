"""Extraction of marked lines from commit messages."""

from __future__ import annotations

import re
from typing import List, Optional

from ..git.repository import TagRepository
from ..models import CommitRange

BULLET = "• "


class CommitMessageExtractor:
    """Collects lines carrying a message key (e.g. ``CHANGELOG``) across a commit range.

    Lines are kept when they contain the key as a plain, case-sensitive
    substring; the key itself, an optional colon and surrounding whitespace are
    then replaced with a bullet. Output follows ``log`` order, then line order.
    """

    def __init__(self, repository: TagRepository, bullet: str = BULLET) -> None:
        self.repository = repository
        self.bullet = bullet

    def extract(self, message_key: str, commit_range: Optional[CommitRange] = None) -> List[str]:
        return [
            self.format_line(message_key, line)
            for line in self.marked_lines(message_key, commit_range)
        ]

    def marked_lines(self, message_key: str, commit_range: Optional[CommitRange] = None) -> List[str]:
        """Return raw lines containing ``message_key``, without the bullet rewrite."""
        if not message_key:
            raise ValueError("Commit message key must not be empty")
        lines: List[str] = []
        for commit in self.repository.log(commit_range):
            lines.extend(
                line for line in commit.full_message.split("\n") if message_key in line
            )
        return lines

    def format_line(self, message_key: str, line: str) -> str:
        return _key_pattern(message_key).sub(self.bullet, line)


def _key_pattern(message_key: str) -> re.Pattern[str]:
    return re.compile(rf"\s*{re.escape(message_key)}:?\s*")


__all__ = ["BULLET", "CommitMessageExtractor"]
