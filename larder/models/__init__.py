"""Core data structures for larder."""

from larder.models.config import LarderConfig
from larder.models.cookbook import Cookbook, CookbookMetrics, CookbookVersion, DownloadMetrics
from larder.models.notice import ChangeNotice
from larder.models.universe import Package, Universe, VersionEntry

__all__ = [
    "ChangeNotice",
    "Cookbook",
    "CookbookMetrics",
    "CookbookVersion",
    "DownloadMetrics",
    "LarderConfig",
    "Package",
    "Universe",
    "VersionEntry",
]
