"""Exceptions raised by the rostering model and enumerator."""
from typing import List, Optional


class RosterError(Exception):
    """Base class for all nurse_rota errors."""

    pass


class ConfigurationError(RosterError, ValueError):
    """Raised when a configuration is rejected before any variable is created."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid roster configuration: " + "; ".join(self.errors))


class SolutionIndexError(RosterError, IndexError):
    """Raised when a solution index is outside [0, count)."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Solution index {index} out of range (count={count})")


class UnknownVariableError(RosterError, KeyError):
    """Raised when a variable was not collected in the solution set."""

    pass


class EnumerationError(RosterError):
    """Raised when the solving engine fails during search.

    Distinct from an infeasible model, which yields an empty solution set.
    """

    def __init__(self, message: str, status: Optional[str] = None):
        self.status = status
        super().__init__(message)


class EnumeratorStateError(RosterError):
    """Raised when enumerate_all is called on an enumerator that already ran."""

    pass
