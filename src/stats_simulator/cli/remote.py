"""CLI commands for driving a running stats-simulator server."""

import json
from typing import Callable, Optional

import click
import httpx

from stats_simulator.cli.cli_types import PositiveInt, Probability
from stats_simulator.cli.client import APIClient


def echo_response(request: Callable[[], httpx.Response]) -> None:
    """Run an API request and print its JSON body, or the error to stderr."""
    try:
        response = request()
        click.echo(json.dumps(response.json(), indent=2))
    except httpx.HTTPStatusError as e:
        try:
            error_details = e.response.json()
            click.echo(json.dumps(error_details, indent=2), err=True)
        except json.JSONDecodeError:
            error_message = {
                "error": "Failed to decode server error response",
                "status_code": e.response.status_code,
                "response_text": e.response.text,
            }
            click.echo(json.dumps(error_message, indent=2), err=True)
    except httpx.RequestError as e:
        error_message = {"error": "Failed to connect to API", "details": str(e)}
        click.echo(json.dumps(error_message, indent=2), err=True)


@click.group("sim")
def sim_cli():
    """Control a simulator running behind the API server."""
    pass


@sim_cli.command("status")
def status():
    """Show parameters, run state and progress."""
    echo_response(APIClient().get_state)


@sim_cli.command("params")
@click.option("--probability", "-p", type=Probability(), help="Probability of success.")
@click.option("--trials", "-t", type=PositiveInt(), help="Trials per experiment.")
@click.option("--experiments", "-n", type=PositiveInt(), help="Number of experiments.")
def params(
    probability: Optional[float],
    trials: Optional[int],
    experiments: Optional[int],
):
    """Update simulation parameters. Clears any previous results."""
    changes = {}
    if probability is not None:
        changes["probability_of_success"] = probability
    if trials is not None:
        changes["trials_per_experiment"] = trials
    if experiments is not None:
        changes["number_of_experiments"] = experiments
    if not changes:
        raise click.UsageError(
            "Provide at least one of --probability, --trials or --experiments."
        )
    client = APIClient()
    echo_response(lambda: client.update_params(changes))


@sim_cli.command("start")
def start():
    """Start a simulation run."""
    echo_response(APIClient().start)


@sim_cli.command("stop")
def stop():
    """Stop the active run, keeping the results collected so far."""
    echo_response(APIClient().stop)


@sim_cli.command("reset")
def reset():
    """Clear results, progress and bar selection."""
    echo_response(APIClient().reset)


@sim_cli.command("results")
@click.option("--limit", type=int, default=100, help="Number of results to return.")
@click.option("--offset", type=int, default=0, help="Number of results to skip.")
def results(limit: int, offset: int):
    """List completed experiments."""
    client = APIClient()
    echo_response(lambda: client.get_results(limit=limit, offset=offset))


@sim_cli.command("histogram")
@click.option(
    "--binning",
    type=click.Choice(["unlimited", "capped"], case_sensitive=False),
    default="unlimited",
    help="One bin per success count, or at most 20 range bins.",
)
def histogram(binning: str):
    """Show the histogram of success counts."""
    client = APIClient()
    echo_response(lambda: client.get_histogram(binning.lower()))


@sim_cli.command("stats")
def stats():
    """Show summary statistics and the z-test of the mean."""
    echo_response(APIClient().get_statistics)


@sim_cli.command("select")
@click.argument("index", type=int)
def select(index: int):
    """Select the histogram bar at INDEX and show its statistics."""
    client = APIClient()
    echo_response(lambda: client.select_bar(index))


@sim_cli.command("selection")
def selection():
    """Show statistics for the selected bar."""
    echo_response(APIClient().get_selection)


@sim_cli.command("clear-selection")
def clear_selection():
    """Clear the bar selection."""
    echo_response(APIClient().clear_selection)


@sim_cli.command("speed")
@click.argument("speed_ms", type=int)
def speed(speed_ms: int):
    """Set the pause between experiments in milliseconds (10-200)."""
    client = APIClient()
    echo_response(lambda: client.set_animation_speed(speed_ms))
