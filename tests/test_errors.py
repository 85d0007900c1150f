"""Tests for error classes."""

from chartrepo.errors import (
    ChartRepoError,
    ConfigurationError,
    CredentialPromptError,
    DuplicateRepositoryError,
    InvalidIndexError,
    InvalidRegistryFormatError,
    LockAcquisitionError,
    LockError,
    LockTimeoutError,
    NetworkError,
    RegistryFileError,
    RepositoryError,
    RepositoryNotFoundError,
    RepositoryUnreachableError,
    UnsupportedSchemeError,
)


class TestErrorClasses:
    """Tests for all error classes."""

    def test_base_error(self) -> None:
        error = ChartRepoError("Base error message")
        assert str(error) == "Base error message"
        assert error.message == "Base error message"

    def test_registry_file_errors(self) -> None:
        """Test the registry file error hierarchy."""
        error = InvalidRegistryFormatError("not a mapping", path="/home/repositories.yaml", expected_type="list")

        assert error.path == "/home/repositories.yaml"
        assert error.expected_type == "list"
        assert isinstance(error, RegistryFileError)
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, ChartRepoError)

    def test_repository_errors(self) -> None:
        for cls in (DuplicateRepositoryError, RepositoryNotFoundError, RepositoryUnreachableError):
            error = cls("problem", "stable", "https://charts.example.com")
            assert error.name == "stable"
            assert error.url == "https://charts.example.com"
            assert isinstance(error, RepositoryError)

    def test_unreachable_keeps_cause(self) -> None:
        cause = NetworkError("connection refused", "https://charts.example.com/index.yaml")
        try:
            try:
                raise cause
            except NetworkError as e:
                raise RepositoryUnreachableError("unreachable", "stable") from e
        except RepositoryUnreachableError as error:
            assert error.__cause__ is cause

    def test_network_errors(self) -> None:
        error = UnsupportedSchemeError("no handler", "oci", "oci://registry.example.com")
        assert error.scheme == "oci"
        assert error.url == "oci://registry.example.com"
        assert isinstance(error, NetworkError)

    def test_invalid_index_error(self) -> None:
        error = InvalidIndexError("no API version specified", "https://charts.example.com/index.yaml")
        assert error.url == "https://charts.example.com/index.yaml"
        assert not isinstance(error, NetworkError)

    def test_lock_errors(self) -> None:
        timeout = LockTimeoutError("timed out", "/home/repositories.yaml.lock", 30.0)
        assert timeout.timeout == 30.0
        assert timeout.path == "/home/repositories.yaml.lock"
        assert isinstance(timeout, LockError)
        assert isinstance(LockAcquisitionError("no locks", "x.lock"), LockError)

    def test_credential_prompt_error(self) -> None:
        error = CredentialPromptError("failed to read password", "alice")
        assert error.username == "alice"
        assert str(error) == "failed to read password"
