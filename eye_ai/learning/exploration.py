"""
Exploration schedules
Decay epsilon over training steps and push it into a running agent
"""
import logging
from typing import Optional

from eye_ai.config import config
from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.utils.math_utils import is_finite_number

logger = logging.getLogger(__name__)

class EpsilonSchedule:
    """
    Linear or exponential decay from start to end over decay_steps
    """

    MODES = ("linear", "exponential")

    def __init__(self, start: Optional[float] = None, end: Optional[float] = None,
                 decay_steps: Optional[int] = None, mode: str = "linear"):
        self.start = start if start is not None else config.EPSILON
        self.end = end if end is not None else config.EPSILON_END
        self.decay_steps = decay_steps if decay_steps is not None else config.EPSILON_DECAY_STEPS
        self.mode = mode

        for name in ('start', 'end'):
            value = getattr(self, name)
            if not is_finite_number(value) or not 0.0 <= value <= 1.0:
                raise ConstructionError(f"{name} must be in [0, 1], got {value!r}")
        if isinstance(self.decay_steps, bool) or not isinstance(self.decay_steps, int) or self.decay_steps <= 0:
            raise ConstructionError(f"decay_steps must be a positive integer, got {self.decay_steps!r}")
        if mode not in self.MODES:
            raise ConstructionError(f"mode must be one of {self.MODES}, got {mode!r}")
        if mode == "exponential" and (self.start == 0.0 or self.end == 0.0):
            raise ConstructionError("exponential decay needs start and end > 0")

    def value(self, step: int) -> float:
        """Epsilon after step training steps"""
        if step < 0:
            raise InvalidArgumentError(f"step must be >= 0, got {step}")
        fraction = min(step / self.decay_steps, 1.0)
        if self.mode == "linear":
            return self.start + (self.end - self.start) * fraction
        # Geometric interpolation hits end exactly at decay_steps
        return min(1.0, self.start * (self.end / self.start) ** fraction)

    def apply(self, agent, step: int) -> float:
        """Set the agent's exploration rate for step and return it"""
        epsilon = self.value(step)
        agent.set_exploration_rate(epsilon)
        return epsilon
