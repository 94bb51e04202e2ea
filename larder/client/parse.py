"""Decoding of registry JSON documents into larder models.

Field coercion follows what the Supermarket API actually returns:

* ``average_rating`` is ``null`` for unrated cookbooks -> 0.0.
* ``deprecated`` / ``foodcritic_failure`` may be ``null`` -> False.
* missing or ``null`` strings -> "", missing or ``null`` maps/lists -> empty.

Map values are never left as None so the diff engine only ever sees
present-and-possibly-empty entities.  Any structural mismatch raises
MalformedResponseError naming the offending field.
"""

from __future__ import annotations

from typing import Any

from larder.client.errors import MalformedResponseError
from larder.models.cookbook import Cookbook, CookbookMetrics, CookbookVersion, DownloadMetrics
from larder.models.universe import Package, Universe, VersionEntry


def _object(value: Any, source: str, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedResponseError(source, f"{what} must be an object, got {type(value).__name__}")
    return value


def _text(value: Any, source: str, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise MalformedResponseError(source, f"{what} must be a string, got {type(value).__name__}")
    return str(value)


def _number(value: Any, source: str, what: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise MalformedResponseError(source, f"{what} must be a number, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass
    raise MalformedResponseError(source, f"{what} must be a number, got {value!r}")


def _count(value: Any, source: str, what: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedResponseError(source, f"{what} must be an integer, got {value!r}")
    return value


def _flag(value: Any, source: str, what: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise MalformedResponseError(source, f"{what} must be a boolean, got {value!r}")
    return value


def _text_map(value: Any, source: str, what: str) -> dict[str, str]:
    return {str(key): _text(item, source, f"{what}.{key}") for key, item in _object(value, source, what).items()}


# ---------------------------------------------------------------------------
# Cookbook detail
# ---------------------------------------------------------------------------


def parse_cookbook(data: Any, source: str) -> Cookbook:
    """Build a Cookbook from a ``/cookbooks/<name>`` response fetched from *source*."""
    body = _object(data, source, "cookbook")

    raw_versions = body.get("versions")
    if raw_versions is None:
        raw_versions = []
    if not isinstance(raw_versions, list):
        raise MalformedResponseError(source, "versions must be a list")

    metrics = _object(body.get("metrics"), source, "metrics")
    downloads = _object(metrics.get("downloads"), source, "metrics.downloads")
    per_version = {
        str(key): _count(count, source, f"metrics.downloads.versions.{key}")
        for key, count in _object(downloads.get("versions"), source, "metrics.downloads.versions").items()
    }

    return Cookbook(
        endpoint=source,
        name=_text(body.get("name"), source, "name"),
        maintainer=_text(body.get("maintainer"), source, "maintainer"),
        description=_text(body.get("description"), source, "description"),
        category=_text(body.get("category"), source, "category"),
        latest_version=_text(body.get("latest_version"), source, "latest_version"),
        external_url=_text(body.get("external_url"), source, "external_url"),
        average_rating=_number(body.get("average_rating"), source, "average_rating"),
        created_at=_text(body.get("created_at"), source, "created_at"),
        updated_at=_text(body.get("updated_at"), source, "updated_at"),
        deprecated=_flag(body.get("deprecated"), source, "deprecated"),
        foodcritic_failure=_flag(body.get("foodcritic_failure"), source, "foodcritic_failure"),
        versions=[_text(item, source, "versions[]") for item in raw_versions],
        metrics=CookbookMetrics(
            downloads=DownloadMetrics(
                total=_count(downloads.get("total"), source, "metrics.downloads.total"),
                versions=per_version,
            ),
            followers=_count(metrics.get("followers"), source, "metrics.followers"),
        ),
    )


def parse_cookbook_version(data: Any, source: str) -> CookbookVersion:
    """Build a CookbookVersion from a ``/cookbooks/<name>/versions/<v>`` response."""
    body = _object(data, source, "cookbook version")
    return CookbookVersion(
        endpoint=source,
        license=_text(body.get("license"), source, "license"),
        tarball_file_size=_count(body.get("tarball_file_size"), source, "tarball_file_size"),
        version=_text(body.get("version"), source, "version"),
        average_rating=_number(body.get("average_rating"), source, "average_rating"),
        cookbook=_text(body.get("cookbook"), source, "cookbook"),
        file=_text(body.get("file"), source, "file"),
        dependencies=_text_map(body.get("dependencies"), source, "dependencies"),
    )


# ---------------------------------------------------------------------------
# Universe
# ---------------------------------------------------------------------------


def parse_version_entry(data: Any, source: str, what: str = "version") -> VersionEntry:
    body = _object(data, source, what)
    return VersionEntry(
        location_type=_text(body.get("location_type"), source, f"{what}.location_type"),
        location_path=_text(body.get("location_path"), source, f"{what}.location_path"),
        download_url=_text(body.get("download_url"), source, f"{what}.download_url"),
        dependencies=_text_map(body.get("dependencies"), source, f"{what}.dependencies"),
    )


def parse_package(name: str, data: Any, source: str) -> Package:
    """Build the Package *name* from its ``{version: entry}`` universe object."""
    versions = _object(data, source, name)
    return Package(
        name=name,
        versions={
            str(version): parse_version_entry(entry, source, f"{name}.{version}") for version, entry in versions.items()
        },
    )


def parse_universe(data: Any, source: str) -> Universe:
    """Build a Universe from a ``/universe`` response (or a stored snapshot)."""
    body = _object(data, source, "universe")
    return Universe(packages={str(name): parse_package(str(name), item, source) for name, item in body.items()})


def universe_to_wire(universe: Universe) -> dict[str, object]:
    """Inverse of parse_universe: the ``/universe`` JSON shape, keys sorted."""
    return {name: package.to_dict()["versions"] for name, package in sorted(universe.packages.items())}
