"""Registry client package: HTTP transport, response parsing, error taxonomy."""

from larder.client.errors import (
    LarderError,
    MalformedResponseError,
    PackageNotFoundError,
    RegistryStatusError,
    RegistryTransportError,
    SnapshotError,
)
from larder.client.supermarket import SupermarketClient, fetch_package, fetch_universe, universe_url

__all__ = [
    "LarderError",
    "MalformedResponseError",
    "PackageNotFoundError",
    "RegistryStatusError",
    "RegistryTransportError",
    "SnapshotError",
    "SupermarketClient",
    "fetch_package",
    "fetch_universe",
    "universe_url",
]
