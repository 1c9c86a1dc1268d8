"""CLI entrypoints for buildpublish commands."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from .changelog.render import DESTINATIONS, RenderOptions, render_changelog
from .config import CONFIG_FILE_NAME, BuildPublishConfig, ConfigError, load_config
from .errors import BuildPublishError, TagNotFoundError
from .git.repository import GitTagRepository
from .logging import configure_logging, get_logger
from .pipeline import (
    generate_build_tag_file,
    generate_changelog_file,
    no_changes_message,
    resolve_build_tag,
)
from .tags.pattern import validate_build_tag_pattern
from .tags.serialization import next_build_tag_name, read_build_tag_file, write_build_tag_file
from .versions import release_name, version_code, version_name


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_repository_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-path",
        default=".",
        help="Path to the git repository (defaults to current directory).",
    )
    parser.add_argument(
        "--variant",
        required=True,
        help="Build variant to resolve, e.g. armv8MinApi21AlphaDebug.",
    )
    parser.add_argument(
        "--tag-pattern",
        default=None,
        help="Build tag regex with a %%s variant placeholder and a build number group.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildpublish",
        description="Derive build tags and changelogs from git history.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to {CONFIG_FILE_NAME} (defaults to the repository root).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tag_parser = subparsers.add_parser(
        "tag",
        help="Write the most recent build tag of a variant as JSON.",
    )
    _add_verbose_option(tag_parser, suppress_default=True)
    _add_repository_options(tag_parser)
    tag_parser.add_argument("--out-tag-json", required=True, help="Output build tag JSON file.")
    tag_parser.add_argument(
        "--use-stub-fallback",
        action="store_true",
        default=None,
        help="Write a stub tag instead of failing when no build tag exists.",
    )

    changelog_parser = subparsers.add_parser(
        "changelog",
        help="Generate the changelog between the last two build tags of a variant.",
    )
    _add_verbose_option(changelog_parser, suppress_default=True)
    _add_repository_options(changelog_parser)
    changelog_parser.add_argument(
        "--message-key",
        default=None,
        help="Key marking changelog lines in commit messages, e.g. CHANGELOG.",
    )
    changelog_parser.add_argument(
        "--out-changelog-file", required=True, help="Output changelog text file."
    )
    changelog_parser.add_argument(
        "--out-tag-json", default=None, help="Also write the resolved build tag JSON here."
    )
    changelog_parser.add_argument(
        "--empty-placeholder",
        action="store_true",
        help="Write a 'no changes' message instead of an empty changelog file.",
    )

    next_tag_parser = subparsers.add_parser(
        "next-tag",
        help="Print the tag name following the one stored in a build tag JSON file.",
    )
    _add_verbose_option(next_tag_parser, suppress_default=True)
    next_tag_parser.add_argument("--tag-json", required=True, help="Build tag JSON file.")

    version_parser = subparsers.add_parser(
        "version",
        help="Print version name, version code and release name from a build tag JSON file.",
    )
    _add_verbose_option(version_parser, suppress_default=True)
    version_parser.add_argument("--tag-json", required=True, help="Build tag JSON file.")
    version_parser.add_argument(
        "--base-name", default=None, help="Base artifact name used for the release name."
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Render a changelog file for a distribution destination.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    render_parser.add_argument("--changelog-file", required=True, help="Changelog text file.")
    render_parser.add_argument(
        "--destination", choices=DESTINATIONS, default="plain", help="Target destination."
    )
    render_parser.add_argument("--issue-pattern", default=None, help="Issue number regex.")
    render_parser.add_argument("--issue-url-prefix", default=None, help="Issue tracker URL prefix.")
    render_parser.add_argument(
        "--max-length", type=int, default=None, help="Truncate the output to this many characters."
    )
    render_parser.add_argument(
        "--out", default=None, help="Write the rendered text here instead of stdout."
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for buildpublish commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))
    logger = get_logger("cli")

    try:
        config = _load_config(args)
        if args.command == "tag":
            _run_tag(args, config)
        elif args.command == "changelog":
            _run_changelog(args, config)
        elif args.command == "next-tag":
            print(next_build_tag_name(read_build_tag_file(Path(args.tag_json))))
        elif args.command == "version":
            _run_version(args, config)
        elif args.command == "render":
            _run_render(args, config)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ConfigError, BuildPublishError, ValueError, re.error) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(1, f"buildpublish {args.command} failed: {exc}\n")


def _load_config(args: argparse.Namespace) -> BuildPublishConfig:
    if args.config:
        return load_config(Path(args.config))
    return load_config(Path(getattr(args, "repo_path", ".")))


def _pattern(args: argparse.Namespace, config: BuildPublishConfig) -> str:
    pattern = args.tag_pattern or config.tags.build_tag_pattern
    # Misconfigured patterns must fail before any repository query.
    return validate_build_tag_pattern(pattern)


def _run_tag(args: argparse.Namespace, config: BuildPublishConfig) -> None:
    pattern = _pattern(args, config)
    use_stub = (
        args.use_stub_fallback
        if args.use_stub_fallback is not None
        else config.tags.use_stub_as_fallback
    )
    output = Path(args.out_tag_json)
    build_tag = generate_build_tag_file(
        GitTagRepository(args.repo_path),
        args.variant,
        pattern,
        output,
        use_stub_as_fallback=use_stub,
    )
    print(f"Build tag {build_tag.name} written to {_relativize(output)}")


def _run_changelog(args: argparse.Namespace, config: BuildPublishConfig) -> None:
    pattern = _pattern(args, config)
    message_key = args.message_key or config.changelog.commit_message_key
    if not message_key:
        raise ConfigError(
            f"A commit message key is required: pass --message-key or set "
            f"changelog.commit_message_key in {CONFIG_FILE_NAME}"
        )
    repository = GitTagRepository(args.repo_path)
    output = Path(args.out_changelog_file)

    try:
        build_tag = resolve_build_tag(repository, args.variant, pattern)
    except TagNotFoundError as exc:
        get_logger("cli").warning("%s", exc)
        output.parent.mkdir(parents=True, exist_ok=True)
        if args.empty_placeholder:
            output.write_text(no_changes_message(None), encoding="utf-8")
            print(f"No build tags yet, placeholder changelog written to {_relativize(output)}")
        else:
            output.write_text("", encoding="utf-8")
            print(f"No build tags yet, empty changelog written to {_relativize(output)}")
        return

    if args.out_tag_json:
        write_build_tag_file(build_tag, Path(args.out_tag_json))

    outcome = generate_changelog_file(
        repository,
        message_key,
        build_tag,
        pattern,
        output,
        empty_placeholder=bool(args.empty_placeholder),
    )
    if outcome.generated:
        print(f"Changelog for {build_tag.name} written to {_relativize(outcome.path)}")
    else:
        print(f"No changes for {build_tag.name}, changelog written to {_relativize(outcome.path)}")


def _run_version(args: argparse.Namespace, config: BuildPublishConfig) -> None:
    build_tag = read_build_tag_file(Path(args.tag_json))
    base_name = args.base_name or config.output.base_file_name
    print(f"versionName={version_name(build_tag)}")
    print(f"versionCode={version_code(build_tag)}")
    if base_name:
        print(f"releaseName={release_name(base_name, build_tag)}")


def _run_render(args: argparse.Namespace, config: BuildPublishConfig) -> None:
    changelog_file = Path(args.changelog_file)
    if not changelog_file.is_file():
        raise ValueError(f"Changelog file {changelog_file} does not exist")
    text = changelog_file.read_text(encoding="utf-8")
    if not text.strip():
        get_logger("cli").warning("Changelog file %s is empty, nothing to render", changelog_file)
    options = RenderOptions(
        issue_number_pattern=args.issue_pattern or config.changelog.issue_number_pattern,
        issue_url_prefix=args.issue_url_prefix or config.changelog.issue_url_prefix,
        max_length=args.max_length,
    )
    rendered = render_changelog(text, args.destination, options)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
