"""
Distance-to-step scaling for continuous drags.

A drag of distance d becomes floor(base * growth_rate ** (|d| / threshold))
discrete steps, so longer swipes change the count faster.
"""

from __future__ import annotations

import math
import sys
from typing import Optional

from models.config import StepConfig


DEFAULT_STEP_CONFIG = StepConfig()


def calculate_steps(distance: float, config: Optional[StepConfig] = None) -> int:
    """
    Map a swipe distance to a step count.

    Symmetric in sign and monotonic non-decreasing in |distance|.
    steps(0) == floor(base), i.e. 1 with the default config.

    Args:
        distance: Signed drag distance in pointer units.
        config: Scaling parameters (defaults: base=1, growth_rate=1.15, threshold=50).

    Returns:
        Step count. Saturates at sys.maxsize for distances too large for a float.

    Raises:
        ValueError: If distance is NaN.
    """
    if math.isnan(distance):
        raise ValueError("distance must not be NaN")
    cfg = config or DEFAULT_STEP_CONFIG
    try:
        value = cfg.base * cfg.growth_rate ** (abs(distance) / cfg.threshold)
    except OverflowError:
        return sys.maxsize
    if math.isinf(value):
        return sys.maxsize
    return min(int(math.floor(value)), sys.maxsize)


class StepCalculator:
    """Callable holding a StepConfig; `StepCalculator()(500) == 4`."""

    def __init__(self, config: Optional[StepConfig] = None):
        self._config = config or StepConfig()

    @property
    def config(self) -> StepConfig:
        return self._config

    def steps(self, distance: float) -> int:
        return calculate_steps(distance, self._config)

    __call__ = steps
