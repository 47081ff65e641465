# nurse_rota/engine - Solving engine interface and CP-SAT backend
from .base import (
    EngineStatus,
    SearchLimits,
    SearchOutcome,
    SearchStrategy,
    SolvingEngine,
    ValueSelection,
    VariableSelection,
)
from .cpsat import CpSatEngine

__all__ = [
    "SolvingEngine",
    "CpSatEngine",
    "SearchStrategy",
    "SearchLimits",
    "SearchOutcome",
    "EngineStatus",
    "VariableSelection",
    "ValueSelection",
]
