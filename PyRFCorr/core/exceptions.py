"""Exceptions for PyRFCorr reactivity correlation analysis.

Per-transcript exceptions (load, sequence mismatch, too few values and
undefined correlation) are recovered inside the workers and only ever
surface as counters. The remaining ones are fatal and abort the run
before or during the pool execution.
"""


class DatasetLoadError(IOError):
    """Exception raised when a reactivity dataset cannot be read.

    Missing files, malformed XML and inconsistent sequence/reactivity
    lengths are all reported with this single exception type.
    """
    pass


class SequenceMismatch(ValueError):
    """Exception raised when the two datasets of a pair are not comparable."""
    pass


class InsufficientValues(ValueError):
    """Exception raised when too few positions hold a value in both profiles."""
    pass


class UndefinedCorrelation(ValueError):
    """Exception raised when a correlation coefficient can not be defined.

    This happens for vectors shorter than two values, vectors of different
    lengths or vectors with zero variance.
    """
    pass


class InputPathError(Exception):
    """Exception raised when input paths can not be used for discovery."""
    pass


class NothingToCorrelate(Exception):
    """Exception raised when no transcript is shared by both inputs."""
    pass


class WorkerError(RuntimeError):
    """Exception raised when a worker process died from an unexpected error."""
    pass
