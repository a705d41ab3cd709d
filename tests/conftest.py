import pytest

from stats_simulator.schemas import ExperimentResult, SimulationParams
from stats_simulator.simulation.simulator import Simulator


def make_results(successes):
    return [
        ExperimentResult(experiment_number=i, successes=s, timestamp=float(i))
        for i, s in enumerate(successes, start=1)
    ]


@pytest.fixture
def fair_coin():
    return SimulationParams(
        probability_of_success=0.5, trials_per_experiment=100, number_of_experiments=3
    )


@pytest.fixture
def simulator():
    return Simulator(
        params=SimulationParams(
            probability_of_success=0.5,
            trials_per_experiment=20,
            number_of_experiments=50,
        ),
        delay_ms=0,
        seed=42,
    )
