"""Pydantic models for API request validation."""

from typing import Optional, Union

from pydantic import BaseModel


class ParamsUpdate(BaseModel):
    """
    A partial parameter update.

    Values are taken as typed by the user and validated by the parameter
    store, so strings are allowed.
    """

    probability_of_success: Optional[Union[float, str]] = None
    trials_per_experiment: Optional[Union[int, str]] = None
    number_of_experiments: Optional[Union[int, str]] = None


class BarSelection(BaseModel):
    index: int


class AnimationSpeed(BaseModel):
    speed_ms: int
