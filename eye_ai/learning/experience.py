"""
Experience records exchanged between the simulation loop, replay buffer and agent
"""
from dataclasses import dataclass
from typing import Hashable, List, NamedTuple, Optional

import numpy as np


@dataclass(frozen=True)
class Experience:
    """One observed (state, action, reward, next_state) transition"""
    state: Hashable
    action: Hashable
    reward: float
    next_state: Hashable
    terminal: bool = False


class SampledBatch(NamedTuple):
    """
    A prioritized batch drawn from the replay buffer

    experiences: sampled transitions, in draw order
    leaf_indices: tree leaf index for each sample, passed back to update_priorities
    weights: normalized importance-sampling weights, max exactly 1.0
    write_counts: slot write generation at sampling time, None for hand-built batches
    """
    experiences: List[Experience]
    leaf_indices: np.ndarray
    weights: np.ndarray
    write_counts: Optional[np.ndarray] = None
