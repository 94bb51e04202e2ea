"""Error taxonomy for the registry client and snapshot store.

Every error the fetch layer raises derives from LarderError, so callers can
stop a pipeline before any entity reaches the diff engine.
"""

from __future__ import annotations


class LarderError(Exception):
    """Base class for every larder failure."""


class RegistryTransportError(LarderError):
    """The registry could not be reached (connection refused, timeout, ...)."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"Request to {url} failed: {cause}")
        self.url = url
        self.cause = cause


class RegistryStatusError(LarderError):
    """The registry answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"Request to {url} returned HTTP {status_code}")
        self.url = url
        self.status_code = status_code


class PackageNotFoundError(RegistryStatusError):
    """The requested cookbook does not exist in the registry."""

    def __init__(self, url: str, name: str, status_code: int = 404) -> None:
        super().__init__(url, status_code)
        self.name = name

    def __str__(self) -> str:
        return f"Cookbook {self.name!r} not found at {self.url}"


class MalformedResponseError(LarderError):
    """The response body is not JSON or does not have the expected shape."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Malformed response from {url}: {detail}")
        self.url = url
        self.detail = detail


class SnapshotError(LarderError):
    """A stored snapshot could not be read or written."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Snapshot {path}: {detail}")
        self.path = path
        self.detail = detail
