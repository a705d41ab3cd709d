from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from stats_simulator.config import (
    DEFAULT_EXPERIMENTS,
    DEFAULT_PROBABILITY,
    DEFAULT_TRIALS,
)


class SimulationParams(BaseModel):
    """The parameters of a simulation run."""

    model_config = ConfigDict(frozen=True)

    probability_of_success: float = Field(default=DEFAULT_PROBABILITY, ge=0.0, le=1.0)
    trials_per_experiment: int = Field(default=DEFAULT_TRIALS, gt=0)
    number_of_experiments: int = Field(default=DEFAULT_EXPERIMENTS, gt=0)


class ExperimentResult(BaseModel):
    """The outcome of a single experiment (one batch of Bernoulli trials)."""

    model_config = ConfigDict(frozen=True)

    experiment_number: int = Field(ge=1)
    successes: int = Field(ge=0)
    timestamp: float


class HistogramData(BaseModel):
    """Histogram of success counts, ready for a bar chart."""

    labels: List[str] = []
    data: List[int] = []


class SimulationStats(BaseModel):
    """Summary statistics over the current result set."""

    mean: float = 0.0
    variance: float = 0.0
    standard_deviation: float = 0.0
    min: float = 0.0
    max: float = 0.0
    expected_value: float = 0.0
    z_score: float = 0.0
    p_value: float = 0.0


class SelectedBarStats(BaseModel):
    """Statistics for a single, user-selected success count."""

    successes: int
    frequency: int
    z_score: float
    p_value: float


class SimulatorState(BaseModel):
    """A point-in-time snapshot of the simulator for polling clients."""

    params: SimulationParams
    is_running: bool
    current_experiment: int
    progress: float
    result_count: int
    probability_valid: bool
    last_input_invalid: bool
    last_error: Optional[str] = None
    animation_speed_ms: int
    selected_bar: Optional[int] = None
