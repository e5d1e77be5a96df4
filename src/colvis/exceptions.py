# src/colvis/exceptions.py
"""
Custom errors raised by column visitors.

Numeric degeneracies (zero variance, empty clusters, log of non-positive values)
never raise; they propagate NaN/inf. Only precondition and configuration
violations end up here.
"""

class ColvisError(Exception):
    """Base class for all colvis errors."""
    pass

class LengthMismatchError(ColvisError, ValueError):
    """Raised when paired sequences (index/column, actual/model, ...) differ in length."""
    pass

class VisitorConfigError(ColvisError, ValueError):
    """Raised when a visitor is constructed or configured with invalid arguments."""
    pass
