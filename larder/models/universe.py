"""Universe entity tree: Universe -> Package -> VersionEntry -> dependencies.

Mirrors a Berkshelf-style universe endpoint, e.g.::

    {
        "chef": {
            "0.12.0": {
                "location_type": "opscode",
                "location_path": "https://supermarket.chef.io/api/v1",
                "download_url": "https://supermarket.chef.io/api/v1/cookbooks/chef/versions/0.12.0/download",
                "dependencies": {"runit": ">= 0.0.0", "couchdb": ">= 0.0.0"}
            }
        }
    }

All three kinds are immutable value objects.  A default-constructed
instance is the empty entity of its kind: zero-valued scalars and empty
(never None) maps.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from larder.diff.base import (
    Diff,
    changed_scalar,
    collapse,
    diff_entity_maps,
    diff_leaf_maps,
    entity_map_is_empty,
    entity_maps_equal,
    leaf_map_is_empty,
)


@dataclass(frozen=True)
class VersionEntry:
    """One published version of a package and its dependency constraints."""

    location_type: str = ""
    location_path: str = ""
    download_url: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return (
            not self.location_type
            and not self.location_path
            and not self.download_url
            and leaf_map_is_empty(self.dependencies)
        )

    def equals(self, other: VersionEntry) -> bool:
        return (
            self.location_type == other.location_type
            and self.location_path == other.location_path
            and self.download_url == other.download_url
            and self.dependencies == other.dependencies
        )

    def diff(self, other: VersionEntry) -> Diff[VersionEntry]:
        if self.equals(other):
            return Diff()
        pos_type, neg_type = changed_scalar(self.location_type, other.location_type)
        pos_path, neg_path = changed_scalar(self.location_path, other.location_path)
        pos_url, neg_url = changed_scalar(self.download_url, other.download_url)
        pos_deps, neg_deps = diff_leaf_maps(self.dependencies, other.dependencies)
        positive = VersionEntry(
            location_type=pos_type,
            location_path=pos_path,
            download_url=pos_url,
            dependencies=pos_deps,
        )
        negative = VersionEntry(
            location_type=neg_type,
            location_path=neg_path,
            download_url=neg_url,
            dependencies=neg_deps,
        )
        return Diff(positive=collapse(positive), negative=collapse(negative))

    def to_dict(self) -> dict[str, object]:
        return {
            "location_type": self.location_type,
            "location_path": self.location_path,
            "download_url": self.download_url,
            "dependencies": dict(sorted(self.dependencies.items())),
        }


@dataclass(frozen=True)
class Package:
    """A named cookbook and every published version of it, keyed by version string."""

    name: str = ""
    versions: dict[str, VersionEntry] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.name and entity_map_is_empty(self.versions)

    def equals(self, other: Package) -> bool:
        return self.name == other.name and entity_maps_equal(self.versions, other.versions)

    def diff(self, other: Package) -> Diff[Package]:
        if self.equals(other):
            return Diff()
        pos_name, neg_name = changed_scalar(self.name, other.name)
        pos_versions, neg_versions = diff_entity_maps(self.versions, other.versions)
        positive = Package(name=pos_name, versions=pos_versions)
        negative = Package(name=neg_name, versions=neg_versions)
        return Diff(positive=collapse(positive), negative=collapse(negative))

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "versions": {key: entry.to_dict() for key, entry in sorted(self.versions.items())},
        }


@dataclass(frozen=True)
class Universe:
    """Every package of a registry, keyed by package name."""

    packages: dict[str, Package] = field(default_factory=dict)

    def get(self, name: str) -> Package | None:
        return self.packages.get(name)

    def is_empty(self) -> bool:
        return entity_map_is_empty(self.packages)

    def equals(self, other: Universe) -> bool:
        return entity_maps_equal(self.packages, other.packages)

    def diff(self, other: Universe) -> Diff[Universe]:
        if self.equals(other):
            return Diff()
        pos_packages, neg_packages = diff_entity_maps(self.packages, other.packages)
        positive = Universe(packages=pos_packages)
        negative = Universe(packages=neg_packages)
        return Diff(positive=collapse(positive), negative=collapse(negative))

    def to_dict(self) -> dict[str, object]:
        return {"packages": {key: package.to_dict() for key, package in sorted(self.packages.items())}}
