"""Main CLI command group."""

import os
import sys

import click

from stats_simulator.cli.remote import sim_cli
from stats_simulator.cli.run import run_cli
from stats_simulator.logs import configure_logging

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
def cli():
    """stats-simulator command line interface."""
    # Keep stdout for command output
    configure_logging(stream=sys.stderr)


@cli.command("serve")
@click.option(
    "--host", default=lambda: os.getenv("HOST", "127.0.0.1"), help="Bind host."
)
@click.option(
    "--port",
    type=int,
    default=lambda: int(os.getenv("PORT", "8000")),
    help="Bind port.",
)
def serve(host: str, port: int):
    """Run the API server."""
    import uvicorn

    uvicorn.run("stats_simulator.server.main:app", host=host, port=port, reload=False)


cli.add_command(run_cli)
cli.add_command(sim_cli)


def main():
    """CLI entrypoint."""
    cli()


if __name__ == "__main__":
    main()
