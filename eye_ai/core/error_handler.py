"""
Error Handler: Error tracking for training steps
Records failed calls and reports when the error rate says training should pause
"""
import logging
import threading
import time
import traceback
from typing import Dict, Optional
from collections import deque
from eye_ai.config import config
from eye_ai.core.errors import EyeAIError

logger = logging.getLogger(__name__)

class ErrorHandler:
    """
    Error tracking for the training loop
    The handler only records and reports. Callers still re-raise, and the
    external scheduler decides whether to pause training.
    """

    def __init__(self, max_errors: Optional[int] = None, error_window: Optional[float] = None):
        """
        Initialize error handler

        Args:
            max_errors: Maximum errors inside the window before pausing is advised
            error_window: Time window in seconds to count errors
        """
        self.max_errors = max_errors if max_errors is not None else config.MAX_ERRORS
        self.error_window = error_window if error_window is not None else config.ERROR_WINDOW

        # Error tracking
        self.errors = deque(maxlen=1000)
        self.error_count = 0
        self.last_error_time = 0.0
        self.critical_errors = deque(maxlen=100)
        self._lock = threading.Lock()

        logger.info(f"Error handler initialized: max_errors={self.max_errors}, window={self.error_window}s")

    def record_error(self, error: Exception, context: str = "unknown",
                     component: str = "unknown") -> bool:
        """
        Record an error and decide if training should pause

        Args:
            error: The exception that occurred
            context: Context where error occurred
            component: Component that generated the error

        Returns:
            True if the caller should pause training, False otherwise
        """
        current_time = time.time()
        error_info = {
            'timestamp': current_time,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context,
            'component': component,
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
            'critical': self._is_critical_error(error)
        }

        with self._lock:
            self.errors.append(error_info)
            self.error_count += 1
            self.last_error_time = current_time
            if error_info['critical']:
                self.critical_errors.append(error_info)
            rate_exceeded = self._should_pause_due_to_error_rate(current_time)

        if error_info['critical']:
            logger.critical(f"Unexpected error in {component}/{context}: {error_info['error_type']}: {error}")
            return True

        logger.error(f"Error in {component}/{context}: {error_info['error_type']}: {error}")
        if rate_exceeded:
            logger.error(f"Too many errors ({self.max_errors} within {self.error_window}s) - training should pause")
        return rate_exceeded

    def _is_critical_error(self, error: Exception) -> bool:
        """Anything that is not a contract violation from the core is a bug"""
        return not isinstance(error, EyeAIError)

    def _should_pause_due_to_error_rate(self, current_time: float) -> bool:
        if self.error_count < self.max_errors:
            return False

        recent_errors = [
            e for e in self.errors
            if current_time - e['timestamp'] <= self.error_window
        ]
        return len(recent_errors) >= self.max_errors

    def get_error_stats(self) -> Dict:
        """Get error statistics"""
        current_time = time.time()
        with self._lock:
            recent_errors = [
                e for e in self.errors
                if current_time - e['timestamp'] <= self.error_window
            ]
            total_errors = len(self.errors)
            last_error_time = self.last_error_time

        critical_count = len([e for e in recent_errors if e['critical']])

        return {
            'total_errors': total_errors,
            'recent_errors': len(recent_errors),
            'critical_errors': critical_count,
            'error_rate': len(recent_errors) / self.error_window if self.error_window > 0 else 0,
            'last_error_time': last_error_time,
        }

    def reset(self):
        """Reset error handler (clear error history)"""
        with self._lock:
            self.error_count = 0
            self.errors.clear()
            self.critical_errors.clear()
        logger.info("Error handler reset")
