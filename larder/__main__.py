"""Entry point for `python -m larder`.

Usage:
    python -m larder universe --output universe.json
    uv run python -m larder sync
"""

from __future__ import annotations

from larder.cli import cli

cli()
