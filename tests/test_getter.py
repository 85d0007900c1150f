"""Tests for scheme-selected getters and the chart repository client."""

from pathlib import Path
from typing import List
from unittest.mock import MagicMock, patch

import pytest
import requests

from chartrepo.chart_repository import ChartRepository
from chartrepo.errors import InvalidIndexError, NetworkError, UnsupportedSchemeError
from chartrepo.getter import (
    FileGetter,
    Getter,
    GetterOptions,
    HttpGetter,
    Provider,
    Providers,
    all_providers,
)
from chartrepo.repo_file import RepositoryEntry


class RecordingGetter(Getter):
    """Getter that serves fixed content and remembers requested URLs."""

    def __init__(self, options: GetterOptions, content: bytes = b"apiVersion: v1\n") -> None:
        super().__init__(options)
        self.content = content
        self.urls: List[str] = []

    def get(self, url: str) -> bytes:
        self.urls.append(url)
        return self.content


class TestProviders:
    """Selecting a getter by URL scheme."""

    @pytest.mark.parametrize(
        "url, getter_type",
        [
            ("http://charts.example.com", HttpGetter),
            ("https://charts.example.com", HttpGetter),
            ("HTTPS://charts.example.com", HttpGetter),
            ("file:///srv/charts", FileGetter),
        ],
    )
    def test_builtin_schemes(self, url: str, getter_type: type) -> None:
        assert isinstance(all_providers().for_url(url), getter_type)

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(UnsupportedSchemeError) as exc_info:
            all_providers().for_url("oci://registry.example.com/charts")
        assert exc_info.value.scheme == "oci"

    def test_extra_providers_take_precedence(self) -> None:
        providers = all_providers([Provider(schemes=("https",), new=RecordingGetter)])
        assert isinstance(providers.for_url("https://charts.example.com"), RecordingGetter)

    def test_by_scheme_on_empty_providers(self) -> None:
        with pytest.raises(UnsupportedSchemeError):
            Providers().by_scheme("https")


class TestHttpGetter:
    """HTTP transport built on requests."""

    @patch("chartrepo.getter.requests.get")
    def test_passes_credentials_and_tls_material(self, mock_get: MagicMock) -> None:
        mock_get.return_value.content = b"apiVersion: v1\n"
        getter = HttpGetter(
            GetterOptions(
                username="alice",
                password="s3cret",
                cert_file="/tls/client.crt",
                key_file="/tls/client.key",
                ca_file="/tls/ca.pem",
                timeout=5,
            )
        )

        assert getter.get("https://charts.example.com/index.yaml") == b"apiVersion: v1\n"
        mock_get.assert_called_once_with(
            "https://charts.example.com/index.yaml",
            timeout=5,
            auth=("alice", "s3cret"),
            cert=("/tls/client.crt", "/tls/client.key"),
            verify="/tls/ca.pem",
        )
        mock_get.return_value.close.assert_called_once()

    @patch("chartrepo.getter.requests.get")
    def test_no_auth_without_username(self, mock_get: MagicMock) -> None:
        mock_get.return_value.content = b""
        HttpGetter().get("https://charts.example.com/index.yaml")
        _, kwargs = mock_get.call_args
        assert "auth" not in kwargs
        assert "cert" not in kwargs
        assert "verify" not in kwargs

    @patch("chartrepo.getter.requests.get")
    def test_http_error_status(self, mock_get: MagicMock) -> None:
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        with pytest.raises(NetworkError) as exc_info:
            HttpGetter().get("https://charts.example.com/index.yaml")
        assert exc_info.value.url == "https://charts.example.com/index.yaml"
        assert "404" in str(exc_info.value)

    @patch("chartrepo.getter.requests.get", side_effect=requests.ConnectionError("connection refused"))
    def test_connection_error(self, mock_get: MagicMock) -> None:
        with pytest.raises(NetworkError, match="connection refused"):
            HttpGetter().get("https://unreachable.example.com/index.yaml")


class TestFileGetter:
    """Local file transport."""

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "index.yaml"
        path.write_bytes(b"apiVersion: v1\n")
        assert FileGetter().get(path.as_uri()) == b"apiVersion: v1\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(NetworkError):
            FileGetter().get((tmp_path / "index.yaml").as_uri())


class TestChartRepository:
    """Fetching and caching a repository index."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://charts.example.com", "https://charts.example.com/index.yaml"),
            ("https://charts.example.com/", "https://charts.example.com/index.yaml"),
            ("https://example.com/charts/stable", "https://example.com/charts/stable/index.yaml"),
            ("https://example.com/charts?token=abc", "https://example.com/charts/index.yaml?token=abc"),
        ],
    )
    def test_index_url(self, url: str, expected: str) -> None:
        assert ChartRepository(RepositoryEntry(name="r", url=url)).index_url() == expected

    def test_getter_receives_entry_credentials(self) -> None:
        created: List[RecordingGetter] = []

        def _new(options: GetterOptions) -> Getter:
            getter = RecordingGetter(options)
            created.append(getter)
            return getter

        entry = RepositoryEntry(name="r", url="https://charts.example.com", username="alice", password="pw")
        ChartRepository(entry, Providers([Provider(schemes=("https",), new=_new)]))

        assert created[0].options.username == "alice"
        assert created[0].options.password == "pw"

    def test_download_caches_index(self, tmp_path: Path, repo_url: str, index_yaml: str) -> None:
        cache = tmp_path / "cache" / "stable-index.yaml"
        repository = ChartRepository(RepositoryEntry(name="stable", url=repo_url, cache=str(cache)))

        index = repository.download_index_file(tmp_path / "cache")

        assert index.chart_count == 2
        assert cache.read_text() == index_yaml

    def test_relative_cache_path_resolves_against_cache_dir(self, tmp_path: Path, repo_url: str) -> None:
        repository = ChartRepository(RepositoryEntry(name="stable", url=repo_url, cache="stable-index.yaml"))
        repository.download_index_file(tmp_path / "cache")
        assert (tmp_path / "cache" / "stable-index.yaml").exists()

    def test_invalid_index_is_not_cached(self, tmp_path: Path) -> None:
        providers = Providers([Provider(schemes=("https",), new=lambda o: RecordingGetter(o, b"<html/>"))])
        cache = tmp_path / "cache" / "bad-index.yaml"
        repository = ChartRepository(
            RepositoryEntry(name="bad", url="https://charts.example.com", cache=str(cache)), providers
        )

        with pytest.raises(InvalidIndexError):
            repository.download_index_file(tmp_path / "cache")
        assert not cache.exists()
