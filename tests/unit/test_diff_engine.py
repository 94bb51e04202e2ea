"""Tests for equality, emptiness and diff over Universe / Package / VersionEntry.

Covers the worked scenarios (identical, version added/removed, dependency
constraint changed, top-level scalar change) and the edge-case policies:
verbatim copies for added/removed keys, collapse of vacuous results,
map-order independence and non-mutation of inputs.
"""

from __future__ import annotations

from larder.diff import Diff, collapse, diff_to_dict, equals, is_empty
from larder.models.universe import Package, Universe, VersionEntry

_API = "https://supermarket.chef.io/api/v1"

# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------


def _entry(
    name: str = "chef-dk",
    version: str = "1.0.0",
    dependencies: dict[str, str] | None = None,
) -> VersionEntry:
    return VersionEntry(
        location_type="opscode",
        location_path=_API,
        download_url=f"{_API}/cookbooks/{name}/versions/{version}/download",
        dependencies=dependencies or {},
    )


def _package(name: str = "chef-dk", versions: dict[str, VersionEntry] | None = None) -> Package:
    if versions is None:
        versions = {"2.0.1": _entry(name, "2.0.1")}
    return Package(name=name, versions=versions)


# =====================================================================
# Scenarios
# =====================================================================


class TestScenarios:
    def test_identical_snapshots(self) -> None:
        a = _package("chef-dk")
        b = _package("chef-dk")
        result = a.diff(b)
        assert result == Diff(positive=None, negative=None)
        assert result.is_absent

    def test_version_added(self) -> None:
        v1 = _entry("foo", "1.0.0")
        v2 = _entry("foo", "1.1.0")
        a = _package("foo", {"1.0.0": v1})
        b = _package("foo", {"1.0.0": v1, "1.1.0": v2})

        positive, negative = a.diff(b)

        assert positive == Package(name="", versions={"1.1.0": v2})
        assert negative is None

    def test_version_removed(self) -> None:
        v1 = _entry("foo", "1.0.0")
        v2 = _entry("foo", "1.1.0")
        a = _package("foo", {"1.0.0": v1, "1.1.0": v2})
        b = _package("foo", {"1.0.0": v1})

        positive, negative = a.diff(b)

        assert positive is None
        assert negative == Package(name="", versions={"1.1.0": v2})

    def test_dependency_constraint_changed(self) -> None:
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0"})})
        b = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 2.0"})})

        positive, negative = a.diff(b)

        assert positive == Package(versions={"1.0.0": VersionEntry(dependencies={"zlib": ">= 2.0"})})
        assert negative == Package(versions={"1.0.0": VersionEntry(dependencies={"zlib": ">= 1.0"})})

    def test_top_level_scalar_change_only(self) -> None:
        versions = {"1.0.0": _entry("foo", "1.0.0")}
        a = _package("foo", dict(versions))
        b = _package("bar", dict(versions))

        positive, negative = a.diff(b)

        assert positive == Package(name="bar", versions={})
        assert negative == Package(name="foo", versions={})
        assert diff_to_dict(a.diff(b)) == {
            "positive": {"name": "bar", "versions": {}},
            "negative": {"name": "foo", "versions": {}},
        }


# =====================================================================
# Equality
# =====================================================================


class TestEquality:
    def test_equal_entries(self) -> None:
        assert _entry().equals(_entry())

    def test_different_download_url(self) -> None:
        a = _entry()
        b = VersionEntry(
            location_type=a.location_type,
            location_path=a.location_path,
            download_url="https://elsewhere.example.com/download",
            dependencies=a.dependencies,
        )
        assert not a.equals(b)
        assert not b.equals(a)

    def test_different_dependency_key_sets(self) -> None:
        a = _entry(dependencies={"zlib": ">= 1.0"})
        b = _entry(dependencies={"zlib": ">= 1.0", "xml": ">= 0.0.0"})
        assert not a.equals(b)
        assert not b.equals(a)

    def test_map_insertion_order_is_irrelevant(self) -> None:
        a = _entry(dependencies={"zlib": ">= 1.0", "xml": "~> 2.1", "runit": ">= 0.0.0"})
        b = _entry(dependencies={"runit": ">= 0.0.0", "xml": "~> 2.1", "zlib": ">= 1.0"})
        pa = _package("foo", {"1.0.0": a, "1.1.0": _entry("foo", "1.1.0")})
        pb = _package("foo", {"1.1.0": _entry("foo", "1.1.0"), "1.0.0": b})
        assert a.equals(b)
        assert pa.equals(pb)
        assert pa.diff(pb).is_absent

    def test_absent_values(self) -> None:
        assert equals(None, None) is True
        assert equals(_entry(), None) is False
        assert equals(None, _entry()) is False

    def test_universe_equality(self) -> None:
        a = Universe(packages={"foo": _package("foo"), "bar": _package("bar")})
        b = Universe(packages={"bar": _package("bar"), "foo": _package("foo")})
        assert a.equals(b)
        assert not a.equals(Universe(packages={"foo": _package("foo")}))


# =====================================================================
# Emptiness
# =====================================================================


class TestEmptiness:
    def test_fresh_entities_are_empty(self) -> None:
        assert VersionEntry().is_empty()
        assert Package().is_empty()
        assert Universe().is_empty()

    def test_fresh_entities_have_non_null_maps(self) -> None:
        assert VersionEntry().dependencies == {}
        assert Package().versions == {}
        assert Universe().packages == {}

    def test_absent_is_empty(self) -> None:
        assert is_empty(None)

    def test_any_scalar_makes_entry_non_empty(self) -> None:
        assert not VersionEntry(location_type="opscode").is_empty()
        assert not VersionEntry(location_path=_API).is_empty()
        assert not VersionEntry(download_url=f"{_API}/x").is_empty()
        assert not Package(name="foo").is_empty()

    def test_map_of_empty_values_is_empty(self) -> None:
        assert VersionEntry(dependencies={"zlib": ""}).is_empty()
        assert Package(versions={"1.0.0": VersionEntry()}).is_empty()
        assert Universe(packages={"foo": Package(versions={"1.0.0": VersionEntry()})}).is_empty()

    def test_map_with_populated_value_is_not_empty(self) -> None:
        assert not VersionEntry(dependencies={"zlib": ">= 1.0"}).is_empty()
        assert not Package(versions={"1.0.0": _entry()}).is_empty()
        assert not Universe(packages={"foo": Package(name="foo")}).is_empty()

    def test_collapse(self) -> None:
        assert collapse(Package()) is None
        populated = Package(name="foo")
        assert collapse(populated) is populated


# =====================================================================
# Diff edge cases
# =====================================================================


class TestDiffEdgeCases:
    def test_removed_version_is_a_deep_copy(self) -> None:
        removed = _entry("foo", "1.1.0", {"zlib": ">= 1.0"})
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0"), "1.1.0": removed})
        b = _package("foo", {"1.0.0": _entry("foo", "1.0.0")})

        _, negative = a.diff(b)

        assert negative is not None
        copied = negative.versions["1.1.0"]
        assert copied == removed
        assert copied is not removed
        assert copied.dependencies is not removed.dependencies

    def test_added_version_is_reported_whole(self) -> None:
        added = _entry("foo", "2.0.0", {"zlib": ">= 1.0", "xml": ">= 0.0.0"})
        a = _package("foo", {})
        b = _package("foo", {"2.0.0": added})

        positive, negative = a.diff(b)

        assert positive is not None
        assert positive.versions == {"2.0.0": added}
        assert negative is None

    def test_dependency_added_and_removed_inside_shared_version(self) -> None:
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0", "xml": ">= 0.0.0"})})
        b = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0", "yum": "~> 3.0"})})

        positive, negative = a.diff(b)

        assert positive == Package(versions={"1.0.0": VersionEntry(dependencies={"yum": "~> 3.0"})})
        assert negative == Package(versions={"1.0.0": VersionEntry(dependencies={"xml": ">= 0.0.0"})})

    def test_absent_sub_half_is_left_out_of_parent_map(self) -> None:
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0", "xml": ">= 0.0.0"})})
        b = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0"})})

        positive, negative = a.diff(b)

        assert positive is None
        assert negative == Package(versions={"1.0.0": VersionEntry(dependencies={"xml": ">= 0.0.0"})})

    def test_vacuous_difference_collapses_to_absent(self) -> None:
        a = VersionEntry(dependencies={})
        b = VersionEntry(dependencies={"zlib": ""})
        assert not a.equals(b)
        assert a.diff(b).is_absent

    def test_both_fully_empty_packages(self) -> None:
        a = Package(versions={"1.0.0": VersionEntry()})
        b = Package()
        assert a.diff(b) == Diff()

    def test_scalar_change_propagates_to_root(self) -> None:
        old = _entry("foo", "1.0.0")
        new = VersionEntry(
            location_type="uri",
            location_path=old.location_path,
            download_url=old.download_url,
            dependencies=old.dependencies,
        )
        a = Universe(packages={"foo": _package("foo", {"1.0.0": old}), "bar": _package("bar")})
        b = Universe(packages={"foo": _package("foo", {"1.0.0": new}), "bar": _package("bar")})

        positive, negative = a.diff(b)

        assert positive == Universe(packages={"foo": Package(versions={"1.0.0": VersionEntry(location_type="uri")})})
        assert negative == Universe(
            packages={"foo": Package(versions={"1.0.0": VersionEntry(location_type="opscode")})}
        )

    def test_key_comparison_is_exact(self) -> None:
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0")})
        b = _package("foo", {"1.0.0 ": _entry("foo", "1.0.0")})

        positive, negative = a.diff(b)

        assert positive is not None and set(positive.versions) == {"1.0.0 "}
        assert negative is not None and set(negative.versions) == {"1.0.0"}

    def test_inputs_are_not_mutated(self) -> None:
        a = _package("foo", {"1.0.0": _entry("foo", "1.0.0", {"zlib": ">= 1.0"})})
        b = _package("bar", {"1.1.0": _entry("bar", "1.1.0", {"zlib": ">= 2.0"})})
        before_a = a.to_dict()
        before_b = b.to_dict()

        a.diff(b)

        assert a.to_dict() == before_a
        assert b.to_dict() == before_b


# =====================================================================
# Diff result type
# =====================================================================


class TestDiffResult:
    def test_unpacks_into_halves(self) -> None:
        positive, negative = Diff(positive=Package(name="a"), negative=None)
        assert positive == Package(name="a")
        assert negative is None

    def test_reversed_swaps_halves(self) -> None:
        result = Diff(positive=Package(name="b"), negative=Package(name="a"))
        assert result.reversed() == Diff(positive=Package(name="a"), negative=Package(name="b"))

    def test_render_of_absent_diff_is_empty(self) -> None:
        assert diff_to_dict(Diff()) == {}

    def test_render_omits_absent_half(self) -> None:
        a = Universe(packages={"foo": _package("foo")})
        b = Universe(packages={})
        assert diff_to_dict(a.diff(b)) == {"negative": a.to_dict()}
