"""Utility functions for fetching schema documents.

This module provides the content-fetch capability used by the schema store:
raw bytes for a URI, from local files, HTTP(S) URLs or an in-memory mapping.
"""

from collections.abc import Mapping
import json
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class NotFoundError(Exception):
    """Raised when a URI cannot be fetched."""

    def __init__(self, uri: str, reason: str = "not found"):
        self.uri = uri
        self.reason = reason
        super().__init__(f"Cannot fetch {uri}: {reason}")


class Fetcher(Protocol):
    """Content-fetch capability."""

    def fetch(self, uri: str) -> bytes: ...


def path_to_uri(path: str | Path) -> str:
    """Convert a filesystem path to an absolute ``file://`` URI."""
    return Path(path).expanduser().resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI back to a filesystem path."""
    parsed = urlparse(uri)
    path = unquote(parsed.path)
    if parsed.netloc and parsed.netloc != "localhost":
        path = f"//{parsed.netloc}{path}"
    # file:///C:/x on Windows
    if len(path) > 2 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    return Path(path)


def fetch_file(uri: str) -> bytes:
    """Read a ``file://`` URI.

    Raises:
        NotFoundError: If the file doesn't exist or cannot be read.
    """
    file_path = uri_to_path(uri)
    logger.debug("Fetching schema file: %s", file_path)

    if not file_path.is_file():
        raise NotFoundError(uri, "file does not exist")

    try:
        return file_path.read_bytes()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise NotFoundError(uri, str(e)) from e


def fetch_url(uri: str, timeout: int = 30) -> bytes:
    """Fetch an ``http(s)://`` URI.

    Raises:
        NotFoundError: If the request fails or returns an error status.
    """
    logger.debug("Fetching schema URL: %s", uri)

    try:
        response = requests.get(uri, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", uri)
        raise NotFoundError(uri, "request timed out") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", uri, e)
        raise NotFoundError(uri, "connection error") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, uri)
        raise NotFoundError(uri, f"HTTP error {e.response.status_code}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", uri, e)
        raise NotFoundError(uri, str(e)) from e

    content_type = response.headers.get("content-type", "").lower()
    if "json" not in content_type and not uri.split("#", 1)[0].endswith(".json"):
        logger.warning("URL %s does not have a JSON content type: %s", uri, content_type)

    return response.content


class DefaultFetcher:
    """Fetches ``file``, ``http`` and ``https`` URIs."""

    def __init__(self, timeout: int = 30) -> None:
        self.timeout = timeout

    def fetch(self, uri: str) -> bytes:
        scheme = urlparse(uri).scheme.lower()
        if scheme == "file":
            return fetch_file(uri)
        if scheme in ("http", "https"):
            return fetch_url(uri, self.timeout)
        raise NotFoundError(uri, f"unsupported URI scheme '{scheme}'")


class MappingFetcher:
    """Serves documents from a mapping of URI to JSON value, text or bytes.

    Useful for embedding schemas in an application. Unknown URIs can be
    delegated to a fallback fetcher.
    """

    def __init__(
        self,
        documents: Mapping[str, Any],
        fallback: Fetcher | None = None,
    ) -> None:
        self.documents = dict(documents)
        self.fallback = fallback

    def fetch(self, uri: str) -> bytes:
        if uri in self.documents:
            content = self.documents[uri]
            if isinstance(content, bytes):
                return content
            if isinstance(content, str):
                return content.encode("utf-8")
            return json.dumps(content).encode("utf-8")
        if self.fallback is not None:
            return self.fallback.fetch(uri)
        raise NotFoundError(uri)
