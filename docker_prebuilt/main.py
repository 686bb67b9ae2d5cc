"""
docker-prebuilt — CLI entrypoint.

Usage:
    docker-prebuilt
    python -m docker_prebuilt.main --verbose

There are no install flags: what gets installed comes from the bundled
install.yml (or DOCKER_PREBUILT_CONFIG) and from the host itself.
The flags below only control logging.

Exit codes:
    0  installed, or the requested version was already installed
    2  any host, requirement, config or pipeline failure
"""

from __future__ import annotations

import sys

import click

from docker_prebuilt import __version__
from docker_prebuilt.core.observability.logging_config import resolve_level, setup_logging

EXIT_FAILURE = 2


@click.command()
@click.version_option(version=__version__, prog_name="docker-prebuilt")
@click.option("--verbose", "-v", is_flag=True, help="Show install progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def cli(verbose: bool, quiet: bool, debug: bool) -> None:
    """Install the bundled Docker release onto this Linux host."""
    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    from docker_prebuilt.adapters.privileged import SudoExecutor
    from docker_prebuilt.core.config.loader import load_config
    from docker_prebuilt.core.detection.host import probe_host
    from docker_prebuilt.core.engine.pipeline import InstallPipeline
    from docker_prebuilt.core.errors import ConfigError

    try:
        config = load_config()
    except ConfigError as e:
        click.secho(f"could not install docker: {e}", fg="red", err=True)
        sys.exit(EXIT_FAILURE)

    pipeline = InstallPipeline(config, SudoExecutor())
    report = pipeline.run(pipeline.initial_state(probe_host()))

    if report.ok:
        click.secho(report.message, fg="green")
    else:
        click.secho(report.message, fg="red", err=True)
    sys.exit(report.exit_code)


if __name__ == "__main__":
    cli()
