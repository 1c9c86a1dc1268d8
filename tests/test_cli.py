from __future__ import annotations

import json
from pathlib import Path

import pytest

from buildpublish import cli
from buildpublish.config import CONFIG_FILE_NAME
from tests._fixtures.git_repo_builder import GitRepoBuilder


def _released_repo(git_repo: GitRepoBuilder) -> Path:
    git_repo.commit("Initial commit")
    git_repo.commit("CHANGELOG: first feature")
    git_repo.tag("cabinet+1.2.44-armv8Debug")
    git_repo.commit("CHANGELOG: fix crash ABC-12")
    git_repo.tag("cabinet+1.2.45-armv8Debug", message="Sprint 12")
    return git_repo.path()


def test_parser_accepts_changelog_options() -> None:
    parser = cli._build_parser()

    args = parser.parse_args(
        [
            "-v",
            "changelog",
            "--variant",
            "armv8Debug",
            "--message-key",
            "CHANGELOG",
            "--out-changelog-file",
            "out/changelog.txt",
        ]
    )

    assert args.command == "changelog"
    assert args.verbose is True
    assert args.repo_path == "."
    assert args.tag_pattern is None
    assert args.empty_placeholder is False


def test_parser_requires_variant() -> None:
    parser = cli._build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["tag", "--out-tag-json", "tag.json"])


def test_tag_command_writes_json(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo = _released_repo(git_repo)
    output = tmp_path / "out" / "tag.json"

    cli.main(
        ["tag", "--repo-path", str(repo), "--variant", "armv8Debug", "--out-tag-json", str(output)]
    )

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["name"] == "cabinet+1.2.45-armv8Debug"
    assert payload["buildVersion"] == "1.2"
    assert payload["buildNumber"] == 45
    assert payload["message"] == "Sprint 12"
    assert "Build tag cabinet+1.2.45-armv8Debug written to" in capsys.readouterr().out


def test_tag_command_fails_without_tags(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    git_repo.commit("Initial commit")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "tag",
                "--repo-path",
                str(git_repo.path()),
                "--variant",
                "armv8Debug",
                "--out-tag-json",
                str(tmp_path / "tag.json"),
            ]
        )

    assert excinfo.value.code == 1
    assert "There is no last tag for 'armv8Debug'" in capsys.readouterr().err
    assert not (tmp_path / "tag.json").exists()


def test_tag_command_writes_stub_when_allowed(git_repo: GitRepoBuilder, tmp_path: Path) -> None:
    git_repo.commit("Initial commit")
    output = tmp_path / "tag.json"

    cli.main(
        [
            "tag",
            "--repo-path",
            str(git_repo.path()),
            "--variant",
            "debug",
            "--out-tag-json",
            str(output),
            "--use-stub-fallback",
        ]
    )

    assert json.loads(output.read_text(encoding="utf-8"))["commitSha"] == "STUB COMMIT SHA"


def test_invalid_pattern_fails_before_querying(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "tag",
                "--repo-path",
                str(tmp_path),
                "--variant",
                "debug",
                "--tag-pattern",
                r"v\d+-%s",
                "--out-tag-json",
                str(tmp_path / "tag.json"),
            ]
        )

    assert excinfo.value.code == 1
    assert "buildpublish tag failed" in capsys.readouterr().err


def test_changelog_command_uses_config_message_key(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo = _released_repo(git_repo)
    (repo / CONFIG_FILE_NAME).write_text(
        "changelog:\n  commit_message_key: CHANGELOG\n", encoding="utf-8"
    )
    changelog = tmp_path / "changelog.txt"
    tag_json = tmp_path / "tag.json"

    cli.main(
        [
            "changelog",
            "--repo-path",
            str(repo),
            "--variant",
            "armv8Debug",
            "--out-changelog-file",
            str(changelog),
            "--out-tag-json",
            str(tag_json),
        ]
    )

    assert changelog.read_text(encoding="utf-8") == "*Sprint 12*\n• fix crash ABC-12\n"
    assert json.loads(tag_json.read_text(encoding="utf-8"))["buildNumber"] == 45
    assert "Changelog for cabinet+1.2.45-armv8Debug written to" in capsys.readouterr().out


def test_changelog_command_without_tags_writes_empty_file(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    git_repo.commit("CHANGELOG: unreleased")
    changelog = tmp_path / "changelog.txt"

    cli.main(
        [
            "changelog",
            "--repo-path",
            str(git_repo.path()),
            "--variant",
            "debug",
            "--message-key",
            "CHANGELOG",
            "--out-changelog-file",
            str(changelog),
        ]
    )

    assert changelog.read_text(encoding="utf-8") == ""
    assert "No build tags yet" in capsys.readouterr().out


def test_changelog_command_requires_message_key(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo = _released_repo(git_repo)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "changelog",
                "--repo-path",
                str(repo),
                "--variant",
                "armv8Debug",
                "--out-changelog-file",
                str(tmp_path / "changelog.txt"),
            ]
        )

    assert excinfo.value.code == 1
    assert "commit message key is required" in capsys.readouterr().err


def _write_tag_json(path: Path) -> Path:
    path.write_text(
        json.dumps(
            {
                "name": "cabinet+1.2.45-armv8Debug",
                "commitSha": "abc",
                "message": None,
                "buildVersion": "1.2",
                "buildVariant": "armv8Debug",
                "buildNumber": 45,
            }
        ),
        encoding="utf-8",
    )
    return path


def test_next_tag_prints_incremented_name(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tag_json = _write_tag_json(tmp_path / "tag.json")

    cli.main(["--config", str(tmp_path), "next-tag", "--tag-json", str(tag_json)])

    assert capsys.readouterr().out.strip() == "cabinet+1.2.46-armv8Debug"


def test_version_prints_derived_values(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tag_json = _write_tag_json(tmp_path / "tag.json")

    cli.main(
        ["--config", str(tmp_path), "version", "--tag-json", str(tag_json), "--base-name", "cabinet"]
    )

    assert capsys.readouterr().out.splitlines() == [
        "versionName=1.2.45",
        "versionCode=45",
        "releaseName=cabinet(1.2.45)",
    ]


def test_next_tag_reports_malformed_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    broken = tmp_path / "tag.json"
    broken.write_text(json.dumps({"name": "x"}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(tmp_path), "next-tag", "--tag-json", str(broken)])

    assert excinfo.value.code == 1
    assert "commitSha not found" in capsys.readouterr().err


def test_render_for_slack(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    changelog = tmp_path / "changelog.txt"
    changelog.write_text("• fix crash ABC-12\n", encoding="utf-8")
    rendered = tmp_path / "slack.txt"

    cli.main(
        [
            "--config",
            str(tmp_path),
            "render",
            "--changelog-file",
            str(changelog),
            "--destination",
            "slack",
            "--issue-pattern",
            r"ABC-\d+",
            "--issue-url-prefix",
            "https://jira.example.com/browse/",
            "--out",
            str(rendered),
        ]
    )

    assert rendered.read_text(encoding="utf-8") == (
        "• fix crash <https://jira.example.com/browse/ABC-12|ABC-12>\n"
    )


def test_render_to_stdout_with_max_length(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    changelog = tmp_path / "changelog.txt"
    changelog.write_text("abcdefghij", encoding="utf-8")

    cli.main(
        ["--config", str(tmp_path), "render", "--changelog-file", str(changelog), "--max-length", "5"]
    )

    assert capsys.readouterr().out == "abcd…"


def test_changelog_command_without_tags_writes_placeholder(
    git_repo: GitRepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    git_repo.commit("CHANGELOG: unreleased")
    changelog = tmp_path / "changelog.txt"

    cli.main(
        [
            "changelog",
            "--repo-path",
            str(git_repo.path()),
            "--variant",
            "debug",
            "--message-key",
            "CHANGELOG",
            "--out-changelog-file",
            str(changelog),
            "--empty-placeholder",
        ]
    )

    assert changelog.read_text(encoding="utf-8") == (
        "No changes detected since the start of the project"
    )
    assert "placeholder changelog written to" in capsys.readouterr().out
