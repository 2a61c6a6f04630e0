"""eswatcher command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``eswatcher`` script).
"""

from eswatcher.cli.main import cli

__all__ = ["cli"]
