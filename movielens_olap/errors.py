"""
Error taxonomy for the aggregation pipeline.

Missing user/movie references are deliberately absent from this module:
ratings that point at unknown ids are skipped, never reported.
"""


class MovieLensError(Exception):
    """Base class for all pipeline errors."""


class InvalidConfig(MovieLensError, ValueError):
    """Configuration value out of range. Raised before any work starts."""


class AggregationFailed(MovieLensError, RuntimeError):
    """
    An aggregation unit failed and the whole run was aborted.

    The original exception is available as ``cause`` (and as ``__cause__``).
    """

    def __init__(self, message: str, cause: BaseException = None):
        super().__init__(message)
        self.cause = cause
