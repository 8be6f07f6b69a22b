"""
Time Utilities
Provides a timing context manager and duration formatting
"""
import time
import logging
from typing import Optional

logger = logging.getLogger(__name__)

def format_duration(seconds: float, precision: int = 2) -> str:
    """
    Format duration in human-readable format

    Args:
        seconds: Duration in seconds
        precision: Decimal precision for seconds

    Returns:
        Formatted string (e.g., "1h 23m 45.67s")
    """
    if seconds < 0:
        return "0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs:.{precision}f}s")

    return " ".join(parts)

class Timer:
    """
    Context manager for timing code blocks
    """

    def __init__(self, name: str = "Operation", logger_instance: Optional[logging.Logger] = None):
        """
        Initialize timer

        Args:
            name: Name of the operation being timed
            logger_instance: Optional logger to log timing (defaults to module logger)
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.logger = logger_instance or logger

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.end_time = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()

        if self.logger:
            self.logger.debug(f"{self.name} took {format_duration(self.elapsed(), precision=4)}")

        return False

    def elapsed(self) -> float:
        """
        Get elapsed time

        Returns:
            Elapsed time in seconds
        """
        if self.start_time is None:
            return 0.0

        end = self.end_time if self.end_time else time.perf_counter()
        return end - self.start_time
