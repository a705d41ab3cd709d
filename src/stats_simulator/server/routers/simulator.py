"""Router for controlling the simulator and reading its derived data."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from stats_simulator.schemas import (
    ExperimentResult,
    HistogramData,
    SelectedBarStats,
    SimulationStats,
    SimulatorState,
)
from stats_simulator.server.schemas import AnimationSpeed, BarSelection, ParamsUpdate
from stats_simulator.server.state import get_simulator
from stats_simulator.simulation.histogram import BinningPolicy
from stats_simulator.simulation.simulator import Simulator, SimulatorBusyError

router = APIRouter(prefix="/simulator", tags=["simulator"])


@router.get("/state", response_model=SimulatorState)
async def get_state(simulator: Simulator = Depends(get_simulator)):
    """Return the current parameters, run state and progress."""
    return simulator.state()


@router.patch("/params", response_model=SimulatorState)
async def update_params(
    payload: ParamsUpdate, simulator: Simulator = Depends(get_simulator)
):
    """
    Merge a partial parameter update.

    Invalid values are not an error: the previous parameters are kept and the
    returned state has `last_input_invalid` set.
    """
    changes = payload.model_dump(exclude_unset=True)
    try:
        simulator.set_params(**changes)
    except SimulatorBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return simulator.state()


@router.post("/params/restore-default-probability", response_model=SimulatorState)
async def restore_default_probability(simulator: Simulator = Depends(get_simulator)):
    """Reset the probability of success to its default value."""
    try:
        simulator.restore_default_probability()
    except SimulatorBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return simulator.state()


@router.post("/start")
async def start_simulation(simulator: Simulator = Depends(get_simulator)):
    """Start a run in the background. Does nothing if one is already active."""
    return {"started": simulator.start()}


@router.post("/stop")
async def stop_simulation(simulator: Simulator = Depends(get_simulator)):
    """Request cooperative cancellation of the active run."""
    return {"stopped": simulator.stop()}


@router.post("/reset", response_model=SimulatorState)
async def reset_simulation(simulator: Simulator = Depends(get_simulator)):
    """Stop any run and clear results, progress and selection."""
    simulator.reset()
    return simulator.state()


@router.get("/results", response_model=list[ExperimentResult])
async def get_results(
    limit: int = Query(default=100, ge=1),
    offset: int = Query(default=0, ge=0),
    simulator: Simulator = Depends(get_simulator),
):
    """Return a page of the experiments completed so far."""
    return simulator.results[offset : offset + limit]


@router.get("/histogram", response_model=HistogramData)
async def get_histogram(
    binning: BinningPolicy = Query(default=BinningPolicy.UNLIMITED),
    simulator: Simulator = Depends(get_simulator),
):
    """Return the histogram of success counts."""
    return simulator.histogram(binning)


@router.get("/statistics", response_model=SimulationStats)
async def get_statistics(simulator: Simulator = Depends(get_simulator)):
    """Return summary statistics and the z-test of the sample mean."""
    return simulator.statistics()


@router.get("/selection", response_model=Optional[SelectedBarStats])
async def get_selection(simulator: Simulator = Depends(get_simulator)):
    """Return statistics for the selected bar, or null if none is selected."""
    return simulator.selected_bar_stats()


@router.post("/selection", response_model=Optional[SelectedBarStats])
async def select_bar(
    payload: BarSelection, simulator: Simulator = Depends(get_simulator)
):
    """Select a histogram bar by its index into the histogram labels."""
    if not simulator.select_bar(payload.index):
        raise HTTPException(
            status_code=422,
            detail=f"No histogram bar at index {payload.index}.",
        )
    return simulator.selected_bar_stats()


@router.delete("/selection")
async def clear_selection(simulator: Simulator = Depends(get_simulator)):
    simulator.clear_selection()
    return {"selected_bar": None}


@router.put("/animation-speed", response_model=SimulatorState)
async def update_animation_speed(
    payload: AnimationSpeed, simulator: Simulator = Depends(get_simulator)
):
    """Set the pause between experiments (clamped to 10-200 ms)."""
    simulator.update_animation_speed(payload.speed_ms)
    return simulator.state()
