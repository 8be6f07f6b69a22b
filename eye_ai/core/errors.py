"""
Error taxonomy for the learning core
All errors are scoped to the single failed call and never fatal to the host
"""


class EyeAIError(Exception):
    """Base class for learning core errors"""


class ConstructionError(EyeAIError, ValueError):
    """Invalid capacity or hyperparameter supplied at construction"""


class InvalidArgumentError(EyeAIError, ValueError):
    """Caller contract violation (None state, bad priority, bad batch request)"""


class EmptyBufferError(InvalidArgumentError):
    """Sampling was requested from a buffer holding no experiences"""


__all__ = ['EyeAIError', 'ConstructionError', 'InvalidArgumentError', 'EmptyBufferError']
