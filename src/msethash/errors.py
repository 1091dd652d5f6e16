"""
Exceptions and Warnings for Multiset Hashing
"""


class MultisetHashError(Exception):
    """Base class for multiset hash errors."""


class InvalidElementError(MultisetHashError, ValueError):
    """
    A non-invertible element (the field's zero) reached an operation
    that has to invert it.

    The condition is deterministic, so retrying is pointless.
    """

    def __init__(self, operation: str, message: str = "element must be nonzero"):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class DegenerateOperationWarning(UserWarning):
    """
    Issued by derived set operations whose group formula collapses to
    a constant result (set_intersection, set_symmetric_difference).
    """
