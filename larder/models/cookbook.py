"""Cookbook detail data structures (``/cookbooks/<name>`` and its versions)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DownloadMetrics:
    """Download counters: overall total and per version string."""

    total: int = 0
    versions: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CookbookMetrics:
    downloads: DownloadMetrics = field(default_factory=DownloadMetrics)
    followers: int = 0


@dataclass(frozen=True)
class Cookbook:
    """Registry metadata for one cookbook.

    ``endpoint`` is the URL the record was fetched from, so two otherwise
    identical cookbooks read from different registries are not equal.
    ``versions`` holds version URLs, newest first, as the registry lists them.
    """

    endpoint: str = ""
    name: str = ""
    maintainer: str = ""
    description: str = ""
    category: str = ""
    latest_version: str = ""
    external_url: str = ""
    average_rating: float = 0.0
    created_at: str = ""
    updated_at: str = ""
    deprecated: bool = False
    foodcritic_failure: bool = False
    versions: list[str] = field(default_factory=list)
    metrics: CookbookMetrics = field(default_factory=CookbookMetrics)

    def equals(self, other: Cookbook) -> bool:
        return self == other

    def to_dict(self) -> dict[str, object]:
        return {
            "endpoint": self.endpoint,
            "name": self.name,
            "maintainer": self.maintainer,
            "description": self.description,
            "category": self.category,
            "latest_version": self.latest_version,
            "external_url": self.external_url,
            "average_rating": self.average_rating,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deprecated": self.deprecated,
            "foodcritic_failure": self.foodcritic_failure,
            "versions": list(self.versions),
            "metrics": {
                "downloads": {
                    "total": self.metrics.downloads.total,
                    "versions": dict(sorted(self.metrics.downloads.versions.items())),
                },
                "followers": self.metrics.followers,
            },
        }


@dataclass(frozen=True)
class CookbookVersion:
    """Registry metadata for one published cookbook version."""

    endpoint: str = ""
    license: str = ""
    tarball_file_size: int = 0
    version: str = ""
    average_rating: float = 0.0
    cookbook: str = ""  # URL of the parent cookbook
    file: str = ""  # tarball download URL
    dependencies: dict[str, str] = field(default_factory=dict)

    def equals(self, other: CookbookVersion) -> bool:
        return self == other

    def to_dict(self) -> dict[str, object]:
        return {
            "endpoint": self.endpoint,
            "license": self.license,
            "tarball_file_size": self.tarball_file_size,
            "version": self.version,
            "average_rating": self.average_rating,
            "cookbook": self.cookbook,
            "file": self.file,
            "dependencies": dict(sorted(self.dependencies.items())),
        }
