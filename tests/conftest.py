"""Shared fixtures for chartrepo tests."""

from pathlib import Path
from typing import Callable, Generator, Optional

import pytest

from chartrepo.config_paths import ENV_HOME, Home

INDEX_YAML = """\
apiVersion: v1
entries:
  nginx:
  - name: nginx
    version: 1.2.0
    urls:
    - nginx-1.2.0.tgz
  redis:
  - name: redis
    version: 7.0.1
    urls:
    - redis-7.0.1.tgz
generated: "2026-10-01T00:00:00Z"
"""


@pytest.fixture(autouse=True)
def _isolated_home_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Never touch the real user data directory."""
    monkeypatch.setenv(ENV_HOME, str(tmp_path / "default-home"))
    yield


@pytest.fixture
def home(tmp_path: Path) -> Home:
    """An empty chartrepo home directory."""
    return Home(tmp_path / "home")


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., str]:
    """Create a local chart repository and return its file:// URL."""

    def _make(name: str = "charts", content: Optional[str] = INDEX_YAML) -> str:
        repo_dir = tmp_path / "repos" / name
        repo_dir.mkdir(parents=True, exist_ok=True)
        if content is not None:
            (repo_dir / "index.yaml").write_text(content)
        return repo_dir.as_uri()

    return _make


@pytest.fixture
def repo_url(make_repo: Callable[..., str]) -> str:
    """URL of a valid local chart repository."""
    return make_repo()


@pytest.fixture
def index_yaml() -> str:
    """Content of a valid repository index with two charts."""
    return INDEX_YAML
