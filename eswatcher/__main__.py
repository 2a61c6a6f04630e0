"""Entry point for `python -m eswatcher`.

Usage:
    python -m eswatcher -namespace=<namespace> -name=<name>
"""

from __future__ import annotations

from eswatcher.cli import cli

cli()
