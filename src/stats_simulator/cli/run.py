"""CLI command for running a simulation locally, without the server."""

import asyncio
import json
import sys

import click
import pandas as pd

from stats_simulator.cli.cli_types import PositiveInt, Probability
from stats_simulator.config import (
    DEFAULT_EXPERIMENTS,
    DEFAULT_PROBABILITY,
    DEFAULT_TRIALS,
)
from stats_simulator.schemas import SimulationParams
from stats_simulator.simulation.histogram import BinningPolicy
from stats_simulator.simulation.simulator import Simulator


@click.command("run")
@click.option(
    "--probability",
    "-p",
    type=Probability(),
    default=DEFAULT_PROBABILITY,
    help="Probability of success of a single trial.",
)
@click.option(
    "--trials",
    "-t",
    type=PositiveInt(),
    default=DEFAULT_TRIALS,
    help="Number of Bernoulli trials per experiment.",
)
@click.option(
    "--experiments",
    "-n",
    type=PositiveInt(),
    default=DEFAULT_EXPERIMENTS,
    help="Number of experiments to run.",
)
@click.option(
    "--delay-ms", default=0, help="Pause between experiments in milliseconds."
)
@click.option("--seed", type=int, default=None, help="Seed for reproducible runs.")
@click.option(
    "--binning",
    type=click.Choice([p.value for p in BinningPolicy], case_sensitive=False),
    default=BinningPolicy.UNLIMITED.value,
    help="Histogram binning policy.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"], case_sensitive=False),
    default="json",
    help="Summary output format.",
)
@click.option(
    "--output",
    "-o",
    type=click.File("w"),
    default=None,
    help="Write per-experiment results as JSON to this file.",
)
def run_cli(
    probability: float,
    trials: int,
    experiments: int,
    delay_ms: int,
    seed,
    binning: str,
    output_format: str,
    output,
):
    """Run a simulation locally and print its histogram and statistics."""
    simulator = Simulator(
        params=SimulationParams(
            probability_of_success=probability,
            trials_per_experiment=trials,
            number_of_experiments=experiments,
        ),
        delay_ms=max(0, delay_ms),
        seed=seed,
    )
    asyncio.run(simulator.run())

    if simulator.last_error:
        click.echo(
            f"Simulation stopped after {simulator.current_experiment} experiments: "
            f"{simulator.last_error}",
            err=True,
        )

    histogram = simulator.histogram(BinningPolicy(binning.lower()))
    statistics = simulator.statistics()

    if output_format.lower() == "table":
        click.echo(
            pd.Series(statistics.model_dump(), name="value").to_frame().to_string()
        )
        click.echo()
        frame = pd.DataFrame(
            {"successes": histogram.labels, "frequency": histogram.data}
        )
        click.echo(frame.to_string(index=False))
    else:
        summary = {
            "params": simulator.params.model_dump(),
            "completed": simulator.current_experiment,
            "statistics": statistics.model_dump(),
            "histogram": histogram.model_dump(),
        }
        click.echo(json.dumps(summary, indent=2))

    if output is not None:
        df = pd.DataFrame([r.model_dump() for r in simulator.results])
        json.dump(df.to_dict(orient="records"), output, indent=2)
        if output is not sys.stdout:
            click.echo(
                f"Successfully wrote {len(df)} experiments to {output.name}", err=True
            )
