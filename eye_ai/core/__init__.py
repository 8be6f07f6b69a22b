"""
Core components: error taxonomy and error tracking
"""
from eye_ai.core.errors import EyeAIError, ConstructionError, InvalidArgumentError, EmptyBufferError
from eye_ai.core.error_handler import ErrorHandler

__all__ = ['EyeAIError', 'ConstructionError', 'InvalidArgumentError', 'EmptyBufferError', 'ErrorHandler']
