"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides throwaway git repositories built with the real git executable.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local gitoops package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from gitoops.workflows.base import WorkflowContext  # noqa: E402
from repo_helpers import commit_file, git  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point git and git-oops at a private home so user config never leaks in."""
    home = tmp_path_factory.mktemp("home")
    gitconfig = home / ".gitconfig"
    gitconfig.write_text(
        "[user]\n"
        "\tname = Test User\n"
        "\temail = test@example.com\n"
        "[init]\n"
        "\tdefaultBranch = main\n"
        "[commit]\n"
        "\tgpgsign = false\n"
        "[tag]\n"
        "\tgpgsign = false\n"
        "[advice]\n"
        "\tdetachedHead = false\n"
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setattr(
        "gitoops.config.loader.GLOBAL_CONFIG_PATH", home / ".config" / "git-oops" / "config.yaml"
    )
    return home


@pytest.fixture
def temp_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository on 'main' with one initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    git(repo_path, "init", "-q", "-b", "main")
    commit_file(repo_path, "README.md", "# Test Repo\n", "Initial commit")
    return repo_path


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """Repository with no commits yet."""
    repo_path = tmp_path / "empty"
    repo_path.mkdir()
    git(repo_path, "init", "-q", "-b", "main")
    return repo_path


@pytest.fixture
def bare_remote(tmp_path: Path) -> Path:
    bare_path = tmp_path / "remote.git"
    git(tmp_path, "init", "-q", "--bare", "-b", "main", str(bare_path))
    return bare_path


@pytest.fixture
def repo_with_remote(temp_repo: Path, bare_remote: Path) -> Path:
    """Repository whose main tracks origin/main."""
    git(temp_repo, "remote", "add", "origin", str(bare_remote))
    git(temp_repo, "push", "-q", "-u", "origin", "main")
    return temp_repo


@pytest.fixture
def ctx(temp_repo: Path) -> WorkflowContext:
    return WorkflowContext.create(temp_repo)
