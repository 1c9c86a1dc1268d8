"""Destination-specific changelog transforms.

The changelog builder produces neutral text. Each destination then applies
its own issue linking, escaping and size budget here.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

ELLIPSIS = "…"

# Telegram MarkdownV2 reserved characters.
MARKDOWN_V2_SPECIAL = "_*[]()~`>#+-=|{}.!"
_MARKDOWN_V2_PATTERN = re.compile("[" + re.escape(MARKDOWN_V2_SPECIAL) + "]")
_NEWLINES = re.compile(r"\r\n|\r|\n")

DESTINATIONS = ("plain", "markdown", "html", "slack", "telegram", "appcenter")

DESTINATION_MAX_LENGTH: Dict[str, int] = {
    "appcenter": 5000,
}

# Longer Telegram changelogs are sent as several messages instead of being cut.
TELEGRAM_MESSAGE_MAX_LENGTH = 4096

ISSUE_LINK_TEMPLATES: Dict[str, str] = {
    "markdown": "[{issue}]({url})",
    "slack": "<{url}|{issue}>",
    "html": '<a href="{url}">{issue}</a>',
}


@dataclass
class RenderOptions:
    """Issue tracker and size settings applied when rendering a changelog."""

    issue_number_pattern: Optional[str] = None
    issue_url_prefix: Optional[str] = None
    max_length: Optional[int] = None


def normalize_newlines(text: str) -> str:
    return _NEWLINES.sub("\n", text)


def link_issues(text: str, issue_pattern: str, url_prefix: str, *, style: str = "markdown") -> str:
    """Turn every issue id matched by ``issue_pattern`` into a link to ``url_prefix + id``."""
    template = ISSUE_LINK_TEMPLATES.get(style)
    if template is None:
        raise ValueError(f"Unsupported issue link style: {style}")
    regex = re.compile(issue_pattern)
    return regex.sub(
        lambda match: template.format(issue=match.group(0), url=f"{url_prefix}{match.group(0)}"),
        text,
    )


def escape_markdown_v2(text: str) -> str:
    return _MARKDOWN_V2_PATTERN.sub(lambda match: "\\" + match.group(0), text)


def escape_slack(text: str) -> str:
    """Escape the three control characters of Slack mrkdwn."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def format_telegram_changelog(
    text: str, issue_pattern: Optional[str] = None, url_prefix: Optional[str] = None
) -> str:
    """Escape ``text`` for MarkdownV2, then link each distinct issue id.

    Ids and URLs are escaped as well, so the replacement targets the already
    escaped form of each id.
    """
    escaped = escape_markdown_v2(text)
    if not issue_pattern or url_prefix is None:
        return escaped
    seen: List[str] = []
    for match in re.finditer(issue_pattern, text):
        if match.group(0) not in seen:
            seen.append(match.group(0))
    for issue in seen:
        issue_id = escape_markdown_v2(issue)
        url = escape_markdown_v2(f"{url_prefix}{issue}")
        escaped = escaped.replace(issue_id, f"[{issue_id}]({url})")
    return escaped


def ellipsize(text: str, size: int) -> str:
    """Cut ``text`` to ``size`` characters, the last one being an ellipsis."""
    if size < 1:
        raise ValueError("size must be positive")
    if len(text) <= size:
        return text
    return text[: size - 1] + ELLIPSIS


def chunked(text: str, size: int) -> List[str]:
    """Split ``text`` into consecutive pieces of at most ``size`` characters."""
    if size < 1:
        raise ValueError("size must be positive")
    return [text[index : index + size] for index in range(0, len(text), size)]


def render_changelog(text: str, destination: str, options: RenderOptions | None = None) -> str:
    """Apply the transforms ``destination`` expects and enforce its size budget."""
    if destination not in DESTINATIONS:
        raise ValueError(f"Unknown destination: {destination}")
    options = options or RenderOptions()
    rendered = normalize_newlines(text)
    has_issue_links = bool(options.issue_number_pattern) and options.issue_url_prefix is not None

    if destination == "telegram":
        rendered = format_telegram_changelog(
            rendered, options.issue_number_pattern, options.issue_url_prefix
        )
    elif destination == "slack":
        rendered = escape_slack(rendered)
        if has_issue_links:
            rendered = link_issues(
                rendered, options.issue_number_pattern, options.issue_url_prefix, style="slack"
            )
    elif destination == "html":
        rendered = html.escape(rendered, quote=False)
        if has_issue_links:
            rendered = link_issues(
                rendered, options.issue_number_pattern, options.issue_url_prefix, style="html"
            )
    elif destination == "markdown" and has_issue_links:
        rendered = link_issues(
            rendered, options.issue_number_pattern, options.issue_url_prefix, style="markdown"
        )

    max_length = options.max_length or DESTINATION_MAX_LENGTH.get(destination)
    if max_length:
        rendered = ellipsize(rendered, max_length)
    return rendered


def render_messages(
    text: str, destination: str, options: RenderOptions | None = None
) -> List[str]:
    """Render ``text`` and split it into the messages the destination can accept."""
    rendered = render_changelog(text, destination, options)
    if destination == "telegram" and len(rendered) > TELEGRAM_MESSAGE_MAX_LENGTH:
        return chunked(rendered, TELEGRAM_MESSAGE_MAX_LENGTH)
    return [rendered]


__all__ = [
    "DESTINATIONS",
    "DESTINATION_MAX_LENGTH",
    "ELLIPSIS",
    "MARKDOWN_V2_SPECIAL",
    "RenderOptions",
    "TELEGRAM_MESSAGE_MAX_LENGTH",
    "chunked",
    "ellipsize",
    "escape_markdown_v2",
    "escape_slack",
    "format_telegram_changelog",
    "link_issues",
    "normalize_newlines",
    "render_changelog",
    "render_messages",
]
