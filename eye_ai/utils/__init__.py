"""
Utilities module for EyeAI learning core
Centralized utility functions used across the codebase
"""
from eye_ai.utils.logger import setup_logger, get_logger
from eye_ai.utils.time_utils import format_duration, Timer
from eye_ai.utils.math_utils import moving_average, calculate_stats, is_finite_number

__all__ = [
    # Logger
    'setup_logger', 'get_logger',
    # Time utils
    'format_duration', 'Timer',
    # Math utils
    'moving_average', 'calculate_stats', 'is_finite_number',
]
