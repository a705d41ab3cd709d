"""The simulator facade consumed by the API and the CLI."""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import structlog

from stats_simulator.config import (
    DEFAULT_DELAY_MS,
    MAX_ANIMATION_SPEED_MS,
    MIN_ANIMATION_SPEED_MS,
    RANDOM_SEED,
)
from stats_simulator.schemas import (
    ExperimentResult,
    HistogramData,
    SelectedBarStats,
    SimulationParams,
    SimulationStats,
    SimulatorState,
)
from stats_simulator.simulation.engine import RunHandle, SimulationEngine
from stats_simulator.simulation.histogram import BinningPolicy, compute_histogram
from stats_simulator.simulation.params import ParameterStore
from stats_simulator.simulation.statistics import (
    compute_selected_bar_stats,
    compute_statistics,
)

log = structlog.get_logger()


class SimulatorBusyError(RuntimeError):
    """Raised when parameters are changed while a run is active."""


class Simulator:
    """
    Owns the parameters, the engine and the bar selection.

    Derived values (histogram, statistics, selected bar statistics) are
    recomputed on read and memoized until the results or parameters change.
    """

    def __init__(
        self,
        params: Optional[SimulationParams] = None,
        delay_ms: int = DEFAULT_DELAY_MS,
        seed: Optional[int] = RANDOM_SEED,
    ):
        self.store = ParameterStore(params)
        self.engine = SimulationEngine(delay_ms=delay_ms, seed=seed)
        self.selected_bar: Optional[int] = None
        self.last_error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._params_version = 0
        self._cache: Dict[Tuple[Any, ...], Any] = {}

    # --- Observables ---

    @property
    def params(self) -> SimulationParams:
        return self.store.params

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    @property
    def current_experiment(self) -> int:
        return self.engine.current_experiment

    @property
    def results(self) -> List[ExperimentResult]:
        return list(self.engine.results)

    @property
    def animation_speed_ms(self) -> int:
        return self.engine.delay_ms

    @property
    def progress(self) -> float:
        return self.current_experiment / self.params.number_of_experiments

    def histogram(
        self, policy: BinningPolicy = BinningPolicy.UNLIMITED
    ) -> HistogramData:
        return self._memoized(
            ("histogram", BinningPolicy(policy)),
            lambda: compute_histogram(self.engine.results, policy),
        )

    def statistics(self) -> SimulationStats:
        return self._memoized(
            ("statistics",),
            lambda: compute_statistics(self.engine.results, self.params),
        )

    def selected_bar_stats(self) -> Optional[SelectedBarStats]:
        return self._memoized(
            ("selected", self.selected_bar),
            lambda: compute_selected_bar_stats(
                self.selected_bar, self.engine.results, self.params
            ),
        )

    def state(self) -> SimulatorState:
        return SimulatorState(
            params=self.params,
            is_running=self.is_running,
            current_experiment=self.current_experiment,
            progress=self.progress,
            result_count=len(self.engine.results),
            probability_valid=self.store.probability_valid,
            last_input_invalid=self.store.last_input_invalid,
            last_error=self.last_error,
            animation_speed_ms=self.animation_speed_ms,
            selected_bar=self.selected_bar,
        )

    def _memoized(self, key, compute):
        version = (self.engine.version, self._params_version)
        cached = self._cache.get(key)
        if cached is not None and cached[0] == version:
            return cached[1]
        value = compute()
        self._cache[key] = (version, value)
        return value

    # --- Commands ---

    def set_params(self, **changes: Any) -> bool:
        """
        Merge a partial parameter update.

        A valid update clears the results, progress and bar selection so that
        statistics are never shown for a different parameter set. Invalid
        input is flagged on the store and leaves everything untouched.
        """
        if self.is_running:
            raise SimulatorBusyError("Cannot change parameters while a run is active.")
        if not self.store.update(**changes):
            return False
        self._params_changed()
        return True

    def restore_default_probability(self) -> None:
        if self.is_running:
            raise SimulatorBusyError("Cannot change parameters while a run is active.")
        self.store.restore_default_probability()
        self._params_changed()

    def _params_changed(self) -> None:
        self._params_version += 1
        self.engine.clear()
        self.selected_bar = None

    def _begin(self) -> Optional[RunHandle]:
        if not self.store.probability_valid:
            log.info("simulation.refused", reason="invalid probability")
            return None
        handle = self.engine.begin(self.params)
        if handle is not None:
            self.selected_bar = None
            self.last_error = None
        return handle

    def start(self) -> bool:
        """
        Schedule a run on the running event loop.

        Returns False without effect if a run is already active or the last
        probability input was invalid.
        """
        loop = asyncio.get_running_loop()
        handle = self._begin()
        if handle is None:
            return False
        self._task = loop.create_task(self._execute(handle))
        return True

    async def run(self) -> bool:
        """Run a simulation to completion in the current task."""
        handle = self._begin()
        if handle is None:
            return False
        await self._execute(handle)
        return True

    async def _execute(self, handle: RunHandle) -> None:
        try:
            await self.engine.execute(handle)
        except Exception as e:
            # Partial results are kept as they are
            self.last_error = str(e) or type(e).__name__

    def stop(self) -> bool:
        return self.engine.stop()

    async def shutdown(self) -> None:
        """Stop any active run and wait for its task to finish."""
        self.engine.stop()
        if self._task is not None:
            await self._task
            self._task = None

    def reset(self) -> None:
        """Stop any active run and clear results, progress and selection."""
        self.engine.stop()
        self.engine.clear()
        self.selected_bar = None
        self.last_error = None

    def select_bar(self, index: int) -> bool:
        """
        Select the success count shown at `index` of the histogram labels.

        Returns False when there is no histogram or the index is out of range.
        """
        labels = self.histogram().labels
        if not 0 <= index < len(labels):
            return False
        self.selected_bar = int(labels[index])
        return True

    def clear_selection(self) -> None:
        self.selected_bar = None

    def update_animation_speed(self, speed_ms: int) -> int:
        """Set the pause between experiments, clamped to the allowed range."""
        self.engine.delay_ms = max(
            MIN_ANIMATION_SPEED_MS, min(MAX_ANIMATION_SPEED_MS, int(speed_ms))
        )
        return self.engine.delay_ms
