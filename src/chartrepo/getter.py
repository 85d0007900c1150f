"""Transports for fetching repository content, selected by URL scheme.

Each :class:`Provider` maps one or more URL schemes to a constructor for a
:class:`Getter`. :func:`all_providers` returns the built-in set: ``http`` and
``https`` through ``requests``, and ``file`` for repositories on local disk.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from .errors import NetworkError, UnsupportedSchemeError
from .logging import LogEvent, log_debug

DEFAULT_TIMEOUT = 60


@dataclass
class GetterOptions:
    """Credentials and TLS material passed to a getter."""

    username: Optional[str] = None
    password: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


class Getter(ABC):
    """Fetches the content at a URL."""

    def __init__(self, options: Optional[GetterOptions] = None) -> None:
        self.options = options or GetterOptions()

    @abstractmethod
    def get(self, url: str) -> bytes:
        """Return the content at ``url``.

        Raises:
            NetworkError: If the content cannot be fetched
        """


class HttpGetter(Getter):
    """Getter for http and https URLs."""

    def _request_kwargs(self) -> dict:
        opts = self.options
        kwargs: dict = {"timeout": opts.timeout}
        if opts.username:
            kwargs["auth"] = (opts.username, opts.password or "")
        if opts.cert_file and opts.key_file:
            kwargs["cert"] = (opts.cert_file, opts.key_file)
        elif opts.cert_file:
            kwargs["cert"] = opts.cert_file
        if opts.ca_file:
            kwargs["verify"] = opts.ca_file
        return kwargs

    def get(self, url: str) -> bytes:
        log_debug(LogEvent.INDEX_FETCH, "Fetching over HTTP", url=url)
        try:
            response = requests.get(url, **self._request_kwargs())
            try:
                response.raise_for_status()
                return response.content
            finally:
                response.close()
        except requests.RequestException as e:
            raise NetworkError(f"failed to fetch {url}: {e}", url) from e


class FileGetter(Getter):
    """Getter for file URLs. Credentials and TLS options are ignored."""

    def get(self, url: str) -> bytes:
        parsed = urlparse(url)
        path = Path(url2pathname(parsed.path))
        log_debug(LogEvent.INDEX_FETCH, "Reading local file", path=str(path))
        try:
            return path.read_bytes()
        except OSError as e:
            raise NetworkError(f"failed to read {url}: {e}", url) from e


class Provider(NamedTuple):
    """A getter constructor and the URL schemes it handles."""

    schemes: Tuple[str, ...]
    new: Callable[[GetterOptions], Getter]

    def provides(self, scheme: str) -> bool:
        return scheme.lower() in self.schemes


class Providers(List[Provider]):
    """Ordered list of providers; the first match for a scheme wins."""

    def by_scheme(self, scheme: str) -> Provider:
        """Find the provider for ``scheme``.

        Raises:
            UnsupportedSchemeError: If no provider handles the scheme
        """
        for provider in self:
            if provider.provides(scheme):
                return provider
        raise UnsupportedSchemeError(f"scheme {scheme!r} not supported", scheme)

    def for_url(self, url: str, options: Optional[GetterOptions] = None) -> Getter:
        """Construct a getter for ``url``.

        Raises:
            UnsupportedSchemeError: If no provider handles the URL's scheme
        """
        scheme = urlparse(url).scheme
        try:
            provider = self.by_scheme(scheme)
        except UnsupportedSchemeError as e:
            raise UnsupportedSchemeError(f"could not find protocol handler for: {scheme or url}", scheme, url) from e
        return provider.new(options or GetterOptions())


def all_providers(extra: Optional[Union[Providers, List[Provider]]] = None) -> Providers:
    """Return the built-in providers, preceded by ``extra`` ones if given."""
    providers = Providers(extra or [])
    providers.extend(
        [
            Provider(schemes=("http", "https"), new=HttpGetter),
            Provider(schemes=("file",), new=FileGetter),
        ]
    )
    return providers
