"""larder command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``larder`` script).
"""

from larder.cli.main import cli

__all__ = ["cli"]
