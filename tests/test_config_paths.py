"""Tests for the config_paths module."""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from chartrepo.config_paths import APP_NAME, ENV_HOME, Home, get_default_home


def test_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """CHARTREPO_HOME takes precedence over the platform directory."""
    monkeypatch.setenv(ENV_HOME, str(tmp_path / "custom"))
    assert get_default_home() == tmp_path / "custom"
    assert Home().path == tmp_path / "custom"


def test_platform_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(ENV_HOME, raising=False)
    with patch("chartrepo.config_paths.platformdirs.user_data_dir") as mock_user_data_dir:
        mock_user_data_dir.return_value = str(tmp_path / APP_NAME)
        assert get_default_home() == tmp_path / APP_NAME
        mock_user_data_dir.assert_called_once_with(APP_NAME)


def test_layout(tmp_path: Path) -> None:
    home = Home(tmp_path)
    assert home.repository_file() == tmp_path / "repository" / "repositories.yaml"
    assert home.cache() == tmp_path / "repository" / "cache"
    assert home.cache_index("stable") == tmp_path / "repository" / "cache" / "stable-index.yaml"


def test_ensure_creates_directories(tmp_path: Path) -> None:
    home = Home(tmp_path / "new")
    assert not home.path.exists()

    home.ensure()
    home.ensure()

    assert home.cache().is_dir()
    assert not home.repository_file().exists()


@pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0, reason="POSIX permissions, non-root")
def test_ensure_rejects_read_only_repository_dir(tmp_path: Path) -> None:
    home = Home(tmp_path)
    home.ensure()
    home.repository().chmod(0o555)
    try:
        with pytest.raises(PermissionError):
            home.ensure()
    finally:
        home.repository().chmod(0o755)
