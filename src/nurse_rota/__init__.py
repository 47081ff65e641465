"""Weekly nurse rostering with exhaustive CP-SAT solution enumeration."""
from .exceptions import (
    ConfigurationError,
    EnumerationError,
    EnumeratorStateError,
    RosterError,
    SolutionIndexError,
    UnknownVariableError,
)
from .models import ContinuityFormulation, RosterConfig
from .solver import SolutionSet, enumerate_roster

__version__ = "0.1.0"

__all__ = [
    "RosterConfig",
    "ContinuityFormulation",
    "SolutionSet",
    "enumerate_roster",
    "RosterError",
    "ConfigurationError",
    "EnumerationError",
    "EnumeratorStateError",
    "SolutionIndexError",
    "UnknownVariableError",
]
