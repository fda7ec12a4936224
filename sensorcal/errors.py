"""
Error Types
===========
Exceptions raised by the calibration pipeline and its data collaborators.
Numeric degeneracy (zero spread, zero denominators) is never an error;
it is resolved in place with fallback constants.
"""


class SensorCalError(Exception):
    """Base class for all SensorCal errors."""


class InputValidationError(SensorCalError, ValueError):
    """Sample matrix or time vector is malformed (empty, mismatched, wrong rank)."""


class DataFormatError(SensorCalError, ValueError):
    """A data file could not be parsed into a time vector and sample matrix."""


class ProcessingCancelled(SensorCalError):
    """Processing was cancelled before all channels completed."""
