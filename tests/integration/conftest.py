"""Shared fixtures for larder integration tests.

Provides a mutable in-memory registry served over ``httpx.MockTransport``
so the fetch -> diff -> notify -> save pipeline runs end to end without
touching a real Supermarket.
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest

from larder.client.supermarket import SupermarketClient
from larder.models.config import RegistryConfig
from larder.models.notice import ChangeNotice
from larder.notifications.manager import NotificationChannel
from larder.snapshot import SnapshotStore

ENDPOINT = "https://supermarket.example.com/api/v1"


# ---------------------------------------------------------------------------
# Universe document factories
# ---------------------------------------------------------------------------


def make_entry(name: str, version: str, dependencies: dict[str, str] | None = None) -> dict:
    """Create one universe version entry with sensible defaults for testing."""
    return {
        "location_type": "opscode",
        "location_path": ENDPOINT,
        "download_url": f"{ENDPOINT}/cookbooks/{name}/versions/{version}/download",
        "dependencies": dependencies or {},
    }


def make_universe_document() -> dict:
    """A small registry: chef depends on runit and zlib, zlib on build-essential."""
    return {
        "chef": {
            "0.12.0": make_entry("chef", "0.12.0", {"runit": ">= 0.0.0"}),
            "0.20.0": make_entry("chef", "0.20.0", {"runit": ">= 0.0.0", "zlib": ">= 0.0.0"}),
        },
        "runit": {"1.5.10": make_entry("runit", "1.5.10")},
        "zlib": {"2.0.0": make_entry("zlib", "2.0.0", {"build-essential": ">= 1.0"})},
    }


# ---------------------------------------------------------------------------
# Registry and pipeline components
# ---------------------------------------------------------------------------


class FakeRegistry:
    """Serves ``document`` at /universe; tests mutate it between syncs."""

    def __init__(self) -> None:
        self.document = make_universe_document()
        self.requests = 0

    def update(self, document: dict) -> None:
        self.document = copy.deepcopy(document)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        if request.url.path == "/universe":
            return httpx.Response(200, json=self.document)
        return httpx.Response(404)


class RecordingChannel(NotificationChannel):
    """Keeps every notice it is asked to send; reports *delivered* as the outcome."""

    def __init__(self, delivered: bool = True) -> None:
        self.notices: list[ChangeNotice] = []
        self.delivered = delivered

    @property
    def channel_name(self) -> str:
        return "recording"

    async def send(self, notice: ChangeNotice) -> bool:
        self.notices.append(notice)
        return self.delivered


@pytest.fixture()
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture()
async def client(registry: FakeRegistry) -> AsyncIterator[SupermarketClient]:
    config = RegistryConfig(endpoint=ENDPOINT, max_retries=0, backoff_seconds=0.0)
    async with SupermarketClient(config, transport=httpx.MockTransport(registry.handler)) as c:
        yield c


@pytest.fixture()
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "universe.json")


@pytest.fixture()
def channel() -> RecordingChannel:
    return RecordingChannel()
