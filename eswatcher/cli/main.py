"""Click entry point for eswatcher.

Flags override the ESWATCHER_* environment configuration. Missing or invalid
arguments print a usage line to stdout and exit with status 1.
"""

from __future__ import annotations

import asyncio
import sys
from typing import NoReturn

import click

from eswatcher import __version__
from eswatcher.app import EXIT_FAILURE, main
from eswatcher.config import load_config, validate_log_format, validate_log_level
from eswatcher.models.config import WatcherConfig
from eswatcher.models.resources import ResourceReference

USAGE = "Usage: eswatcher -namespace=<namespace> -name=<name>"


def _usage_error(detail: str | None = None) -> NoReturn:
    if detail:
        click.echo(f"Error: {detail}")
    click.echo(USAGE)
    sys.exit(EXIT_FAILURE)


def _apply_overrides(
    config: WatcherConfig,
    timeout: float | None,
    interval: float | None,
    wait_forever: bool,
    log_level: str | None,
    log_format: str | None,
) -> None:
    if timeout is not None:
        config.poll.timeout_seconds = timeout
    if interval is not None:
        config.poll.interval_seconds = interval
        config.poll.unbounded_interval_seconds = interval
    if wait_forever:
        config.poll.wait_forever = True
    if log_level is not None:
        config.log.level = validate_log_level(log_level)
    if log_format is not None:
        config.log.format = validate_log_format(log_format)


def build_reference(config: WatcherConfig, namespace: str, name: str) -> ResourceReference:
    """Combine the configured API coordinates with the target namespace and name."""
    return ResourceReference(
        api_group=config.resource.group,
        api_version=config.resource.version,
        kind=config.resource.kind,
        plural=config.resource.plural,
        namespace=namespace,
        name=name,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-namespace", "--namespace", "namespace", default="", help="Namespace of the ExternalSecret.")
@click.option("-name", "--name", "name", default="", help="Name of the ExternalSecret.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for Ready before failing (default 600).",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between status checks.",
)
@click.option("--wait-forever", is_flag=True, default=False, help="Poll until Ready with no deadline.")
@click.option("--log-level", default=None, help="debug, info, warning or error.")
@click.option("--log-format", default=None, help="console or json.")
@click.version_option(__version__, prog_name="eswatcher")
def cli(
    namespace: str,
    name: str,
    timeout: float | None,
    interval: float | None,
    wait_forever: bool,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Wait for an ExternalSecret to report the Ready condition."""
    if not namespace or not name:
        _usage_error()

    try:
        config = load_config()
        _apply_overrides(config, timeout, interval, wait_forever, log_level, log_format)
    except ValueError as exc:
        _usage_error(str(exc))

    reference = build_reference(config, namespace, name)
    sys.exit(asyncio.run(main(config, reference)))
