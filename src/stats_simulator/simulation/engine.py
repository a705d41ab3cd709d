"""
Monte Carlo engine for repeated Bernoulli-trial experiments.

Each experiment draws `trials_per_experiment` uniform values and counts how
many fall below the probability of success. Experiments are emitted one at a
time by an async generator so a caller can render progress and cancel between
experiments.
"""

import asyncio
import time
from typing import AsyncIterator, List, Optional

import numpy as np
import structlog

from stats_simulator.config import DEFAULT_DELAY_MS
from stats_simulator.schemas import ExperimentResult, SimulationParams

log = structlog.get_logger()


def run_experiment(
    experiment_number: int,
    trials: int,
    probability: float,
    rng: np.random.Generator,
) -> ExperimentResult:
    """Run one experiment of `trials` Bernoulli draws."""
    draws = rng.random(trials)
    successes = int(np.count_nonzero(draws < probability))
    return ExperimentResult(
        experiment_number=experiment_number,
        successes=successes,
        timestamp=time.monotonic(),
    )


class RunHandle:
    """Cancellation token for a single run."""

    def __init__(self, params: SimulationParams):
        self.params = params
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SimulationEngine:
    """
    Runs experiments sequentially and accumulates their results.

    Only one run may be active at a time; asking for another while one is in
    progress is a no-op. Cancellation is cooperative and checked once per
    experiment, so an experiment that has started always completes.
    """

    def __init__(
        self,
        delay_ms: int = DEFAULT_DELAY_MS,
        seed: Optional[int] = None,
    ):
        self.delay_ms = delay_ms
        self.rng = np.random.default_rng(seed)
        self.results: List[ExperimentResult] = []
        self.current_experiment = 0
        # Bumped on every change to `results`
        self.version = 0
        self._active: Optional[RunHandle] = None

    @property
    def is_running(self) -> bool:
        return self._active is not None

    def begin(self, params: SimulationParams) -> Optional[RunHandle]:
        """
        Claim the engine for a new run.

        Clears previous results and returns a handle, or None if a run is
        already active.
        """
        if self._active is not None:
            return None
        self.clear()
        self._active = RunHandle(params)
        return self._active

    async def run_simulation(
        self, handle: RunHandle
    ) -> AsyncIterator[ExperimentResult]:
        """Lazily produce the experiments of a run until done or cancelled."""
        params = handle.params
        total = params.number_of_experiments

        for number in range(1, total + 1):
            if handle.cancelled:
                return
            yield run_experiment(
                number,
                params.trials_per_experiment,
                params.probability_of_success,
                self.rng,
            )
            if number < total:
                await asyncio.sleep(self.delay_ms / 1000)

    async def run(self, params: SimulationParams) -> bool:
        """
        Run a full simulation, appending results as they are produced.

        Returns False without doing anything if a run is already active.
        Exceptions raised while running are logged and re-raised; results
        collected so far are kept.
        """
        handle = self.begin(params)
        if handle is None:
            return False
        return await self.execute(handle)

    async def execute(self, handle: RunHandle) -> bool:
        params = handle.params
        log.info("simulation.started", **params.model_dump())
        try:
            async for result in self.run_simulation(handle):
                # A stopped run may wake up after a newer run has begun
                if handle.cancelled:
                    break
                self.results.append(result)
                self.current_experiment = result.experiment_number
                self.version += 1
        except Exception:
            log.exception("simulation.failed", completed=len(self.results))
            raise
        finally:
            if self._active is handle:
                self._active = None

        if handle.cancelled:
            log.info("simulation.stopped", completed=self.current_experiment)
        else:
            log.info("simulation.finished", completed=self.current_experiment)
        return True

    def stop(self) -> bool:
        """Request cancellation of the active run. Returns False when idle."""
        handle = self._active
        if handle is None:
            return False
        handle.cancel()
        self._active = None
        return True

    def clear(self) -> None:
        self.results = []
        self.current_experiment = 0
        self.version += 1
