"""
Math and Statistics Utilities
Summary statistics for TD errors, rewards and priorities
"""
import math
import numpy as np
from typing import List, Deque, Dict, Union
import logging

logger = logging.getLogger(__name__)

def is_finite_number(value) -> bool:
    """
    Check that a value is a real, finite number (bools are rejected)

    Args:
        value: Candidate value

    Returns:
        True for finite ints/floats (including numpy scalars)
    """
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(float(value))

def moving_average(values: Union[List, Deque, np.ndarray], window: int = None) -> float:
    """
    Calculate moving average

    Args:
        values: Sequence of values
        window: Window size (defaults to all values)

    Returns:
        Moving average
    """
    if len(values) == 0:
        return 0.0

    if window is None:
        window = len(values)

    window = min(window, len(values))
    recent = list(values)[-window:]

    return float(np.mean(recent))

def calculate_stats(values: Union[List, Deque, np.ndarray]) -> Dict[str, float]:
    """
    Calculate summary statistics for a sequence

    Args:
        values: Sequence of numeric values

    Returns:
        Dictionary with statistics: mean, std, min, max, median, count
    """
    if len(values) == 0:
        return {
            'mean': 0.0,
            'std': 0.0,
            'min': 0.0,
            'max': 0.0,
            'median': 0.0,
            'count': 0
        }

    arr = np.asarray(list(values), dtype=np.float64)

    return {
        'mean': float(np.mean(arr)),
        'std': float(np.std(arr)),
        'min': float(np.min(arr)),
        'max': float(np.max(arr)),
        'median': float(np.median(arr)),
        'count': len(arr)
    }
