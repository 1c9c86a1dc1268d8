from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from tests._fixtures.fake_repository import FakeTagRepository
from tests._fixtures.git_repo_builder import GitRepoBuilder


@pytest.fixture
def fake_repository() -> FakeTagRepository:
    """Provide an empty in-memory repository tests can fill with commits and tags."""
    return FakeTagRepository()


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """Provide a real throwaway git repository rooted at the pytest tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitRepoBuilder(tmp_path)
