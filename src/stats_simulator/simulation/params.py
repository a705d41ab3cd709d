"""Validated storage for simulation parameters."""

import math
from typing import Any, Optional, Union

import structlog

from stats_simulator.config import PROBABILITY_TOLERANCE
from stats_simulator.schemas import SimulationParams

log = structlog.get_logger()

RawValue = Union[str, int, float, None]


def parse_probability(raw: RawValue) -> Optional[float]:
    """
    Parse a probability typed by a user.

    Values within `PROBABILITY_TOLERANCE` of [0, 1] are accepted and clamped
    into the interval. Returns None for anything that is not a usable
    probability.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    if value < -PROBABILITY_TOLERANCE or value > 1.0 + PROBABILITY_TOLERANCE:
        return None
    return min(1.0, max(0.0, value))


def parse_positive_int(raw: RawValue) -> Optional[int]:
    """Parse a strictly positive integer; returns None when invalid."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value > 0 else None


class ParameterStore:
    """
    Holds the current parameters and the validity of the last input.

    Invalid input never raises: the store keeps its last valid value and
    flags the rejection so a UI can display it.
    """

    def __init__(self, params: Optional[SimulationParams] = None):
        self.params = params or SimulationParams()
        self.probability_valid = True
        self.last_input_invalid = False

    def update(self, **changes: Any) -> bool:
        """
        Merge a partial update into the current parameters.

        Accepted keys are the field names of `SimulationParams`. The update is
        all-or-nothing: if any value is invalid nothing changes.

        Returns True when the parameters were replaced.
        """
        unknown = set(changes) - set(SimulationParams.model_fields)
        if unknown:
            raise TypeError(f"Unknown simulation parameters: {sorted(unknown)}")

        parsed = {}
        rejected = []
        for name, raw in changes.items():
            if name == "probability_of_success":
                value = parse_probability(raw)
            else:
                value = parse_positive_int(raw)
            if value is None:
                log.info("params.rejected", field=name, value=raw)
                rejected.append(name)
            else:
                parsed[name] = value

        if rejected:
            # The flag tracks the probability that would be used by a run
            if "probability_of_success" in rejected:
                self.probability_valid = False
            self.last_input_invalid = True
            return False

        if "probability_of_success" in parsed:
            self.probability_valid = True
        self.last_input_invalid = False
        self.params = self.params.model_copy(update=parsed)
        return True

    def restore_default_probability(self) -> None:
        """Reset the probability to its default after an empty input."""
        default = SimulationParams.model_fields["probability_of_success"].default
        self.params = self.params.model_copy(update={"probability_of_success": default})
        self.probability_valid = True
        self.last_input_invalid = False
