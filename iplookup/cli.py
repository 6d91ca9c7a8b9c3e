"""CLI entry point for iplookup.

Query a STUN server for the current public IP address:
    iplookup stun.l.google.com:19302
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from .client import lookup
from .config import LookupConfig, load_config
from .errors import IPLookupError
from .reporting import JsonReporter

# Any non-empty value enables debug tracing
DEBUG_ENV_VAR = "DEBUG"

EPILOG = f"Env: {DEBUG_ENV_VAR}: enabled with any non-empty value"


def debug_from_env() -> bool:
    return bool(os.environ.get(DEBUG_ENV_VAR))


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


@click.command(
    epilog=EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("endpoint", metavar="HOST:PORT")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML file with retry settings.",
)
@click.option(
    "--attempts",
    type=click.IntRange(min=1),
    default=None,
    help="Number of send attempts (default: 5).",
)
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("--debug", is_flag=True, help=f"Trace request/response (same as {DEBUG_ENV_VAR}=1).")
def main(
    endpoint: str,
    config_path: Optional[Path],
    attempts: Optional[int],
    json_output: bool,
    debug: bool,
) -> None:
    """Query a STUN service for the current public IP address."""
    debug = debug or debug_from_env()
    configure_logging(debug)
    reporter = JsonReporter()

    try:
        config = load_config(config_path) if config_path else LookupConfig()
        config = config.with_attempts(attempts)
        result = asyncio.run(lookup(endpoint, debug=debug, policy=config.retry))

    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)

    except IPLookupError as e:
        if json_output:
            click.echo(reporter.to_json_string(reporter.generate(endpoint, error=str(e))))
        raise click.ClickException(str(e)) from e

    if json_output:
        click.echo(reporter.to_json_string(reporter.generate(endpoint, result=result)))
    else:
        click.echo(result.ip)


if __name__ == "__main__":
    main()
