"""
Exception types for the AGNES clustering engine.

Every error aborts the current clustering run. There is no meaningful
partial result once the distance model itself is invalid, so callers
(runner scripts, reporting) are expected to catch and present these.
"""


class AgnesError(ValueError):
    """Base exception for all clustering errors."""

    pass


class ShapeMismatchError(AgnesError):
    """
    Vectors (or vectors and identifiers) have incompatible lengths.

    Common causes:
    - A spreadsheet row with a different number of skill scores
    - Identifier list not aligned with the vector list
    - A precomputed matrix that is not square
    """

    pass


class DegenerateVectorError(AgnesError):
    """
    Zero-magnitude vector under the cosine metric.

    Only raised in strict mode. By default the cosine metric treats a
    zero vector as orthogonal to everything (distance 1.0).
    """

    pass


class InvalidInputError(AgnesError):
    """Empty vector set: nothing to cluster."""

    pass


class InvalidParameterError(AgnesError):
    """
    Bad run parameter.

    Common causes:
    - Target cluster count k < 1
    - Linkage mode not in {complete, average}
    - Unknown metric name
    """

    pass


class DistanceComputationError(AgnesError):
    """A distance evaluated to NaN or infinity."""

    pass


class ResourceExceededError(AgnesError):
    """
    Iteration or deadline guard tripped before the stop criterion held.

    Action: raise max_iterations / deadline_seconds, or reduce the input.
    """

    pass
