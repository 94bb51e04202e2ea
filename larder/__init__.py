"""larder: Chef Supermarket client and universe diff engine."""

__version__ = "0.1.0"
