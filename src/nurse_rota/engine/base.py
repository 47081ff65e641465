"""
Abstract Solving Engine
=======================
Capability interface the constraint catalog and the enumerator are written
against. Any CSP/SAT backend that can create bounded integer variables, post
the primitives below and enumerate every solution in a fixed search order
can be substituted without touching the catalog.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar, Union


class EngineStatus(Enum):
    """How a search ended."""
    EXHAUSTED = "exhausted"  # Search space fully explored (zero solutions is infeasible)
    TRUNCATED = "truncated"  # Stopped by a time, conflict or solution budget


class VariableSelection(str, Enum):
    """Which unassigned variable to branch on next."""
    CHOOSE_FIRST = "first"


class ValueSelection(str, Enum):
    """Which value to try first on the selected variable."""
    SELECT_MIN_VALUE = "min"
    SELECT_MAX_VALUE = "max"


@dataclass(frozen=True)
class SearchStrategy:
    """Fixed branching order; the same strategy on the same model gives the same ordering."""
    variable_selection: VariableSelection = VariableSelection.CHOOSE_FIRST
    value_selection: ValueSelection = ValueSelection.SELECT_MIN_VALUE


@dataclass(frozen=True)
class SearchLimits:
    """Cooperative budget checked by the engine between search steps."""
    time_limit_seconds: Optional[float] = None
    max_conflicts: Optional[int] = None
    max_solutions: Optional[int] = None

    @property
    def is_bounded(self) -> bool:
        return any(
            v is not None
            for v in (self.time_limit_seconds, self.max_conflicts, self.max_solutions)
        )


@dataclass
class SearchOutcome:
    """Raw result of an exhaustive search over the collected variables."""
    status: EngineStatus
    solutions: List[Tuple[int, ...]] = field(default_factory=list)
    wall_time_seconds: float = 0.0
    conflicts: int = 0
    branches: int = 0
    engine_status: str = ""

    @property
    def truncated(self) -> bool:
        return self.status == EngineStatus.TRUNCATED


# Engine-specific variable handle
TVar = TypeVar("TVar")

Comparison = str  # "<=", ">=" or "=="
COMPARISONS = ("<=", ">=", "==")


class SolvingEngine(ABC, Generic[TVar]):
    """
    Abstract base class for solving backends.

    Type parameter TVar is the backend's variable handle. Boolean
    variables and literals are TVar too; negate() gives the negated literal.
    Every auxiliary variable a backend creates must be fully determined by the
    decision variables, otherwise enumeration reports duplicates.
    """

    @abstractmethod
    def new_int_var(self, lb: int, ub: int, name: str) -> TVar:
        """Create an integer variable with closed domain [lb, ub]."""
        pass

    @abstractmethod
    def new_bool_var(self, name: str) -> TVar:
        pass

    @abstractmethod
    def equals_literal(self, var: TVar, value: int) -> TVar:
        """Boolean literal equivalent to var == value. Repeated calls return the same literal."""
        pass

    @abstractmethod
    def negate(self, literal: TVar) -> TVar:
        pass

    @abstractmethod
    def add_linear(self, terms: Sequence[TVar], op: Comparison, bound: int) -> None:
        """Post sum(terms) <op> bound."""
        pass

    @abstractmethod
    def add_all_different(self, variables: Sequence[TVar]) -> None:
        pass

    @abstractmethod
    def add_bool_or(self, literals: Sequence[TVar]) -> None:
        pass

    @abstractmethod
    def add_element(self, index: TVar, array: Sequence[TVar], target: Union[TVar, int]) -> None:
        """Post array[index] == target."""
        pass

    @abstractmethod
    def add_max_equality(self, target: TVar, variables: Sequence[TVar]) -> None:
        """Post target == max(variables)."""
        pass

    @abstractmethod
    def add_equality_or(self, pairs: Sequence[Tuple[TVar, TVar]]) -> None:
        """Post OR over (a == b) for every pair."""
        pass

    @abstractmethod
    def search_all(
        self,
        variables: Sequence[TVar],
        strategy: SearchStrategy,
        limits: SearchLimits,
    ) -> SearchOutcome:
        """
        Enumerate every feasible assignment, branching on `variables` in order.

        Returns:
            SearchOutcome with one tuple of values (aligned with `variables`)
            per solution.

        Raises:
            EnumerationError: the backend failed during search.
        """
        pass

    @abstractmethod
    def variable_key(self, var: TVar) -> int:
        """Stable integer identity of a variable within this engine."""
        pass
