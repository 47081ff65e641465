"""
Solution Enumerator
===================
Drives a SolvingEngine to exhaustion and exposes every roster it found as
an indexable, countable SolutionSet.

    config -> build_domain_model -> build_constraint_catalog
           -> SolutionEnumerator.enumerate_all -> SolutionSet
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from nurse_rota.engine.base import SearchLimits, SearchOutcome, SearchStrategy, SolvingEngine
from nurse_rota.engine.cpsat import CpSatEngine
from nurse_rota.exceptions import (
    EnumerationError,
    EnumeratorStateError,
    SolutionIndexError,
    UnknownVariableError,
)
from nurse_rota.models.config import RosterConfig
from nurse_rota.models.domain import all_days
from nurse_rota.solver.constraints import build_constraint_catalog
from nurse_rota.solver.variables import RosterVariables, build_domain_model
from nurse_rota.utils.logging_setup import SolverLogger

slog = SolverLogger("nurse_rota.solver.enumerator")


class EnumeratorState(Enum):
    """Lifecycle of one enumeration."""
    UNSOLVED = "unsolved"
    SOLVING = "solving"
    SOLVED = "solved"
    FAILED = "failed"


@dataclass
class EnumerationStats:
    """Search diagnostics; never used for correctness."""
    wall_time_seconds: float = 0.0
    conflicts: int = 0
    branches: int = 0
    engine_status: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wall_time_seconds": round(self.wall_time_seconds, 3),
            "conflicts": self.conflicts,
            "branches": self.branches,
            "engine_status": self.engine_status,
        }


class SolutionSet:
    """Read-only, index-addressable collection of enumerated rosters."""

    def __init__(
        self,
        variables: RosterVariables,
        collected: Sequence[Any],
        rows: List[Tuple[int, ...]],
        column_of: Dict[int, int],
        variable_key,
        truncated: bool = False,
        stats: Optional[EnumerationStats] = None,
    ):
        self.variables = variables
        self.collected = list(collected)
        self._rows = rows
        self._column_of = column_of
        self._variable_key = variable_key
        self.truncated = truncated
        self.stats = stats or EnumerationStats()

    def count(self) -> int:
        """Number of solutions found; 0 means the model is infeasible (unless truncated)."""
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def _row(self, index: int) -> Tuple[int, ...]:
        if not 0 <= index < len(self._rows):
            raise SolutionIndexError(index, len(self._rows))
        return self._rows[index]

    def value_at(self, index: int, variable: Any) -> int:
        """
        Value `variable` took in solution `index`.

        Raises:
            SolutionIndexError: index is outside [0, count())
            UnknownVariableError: variable was not collected
        """
        row = self._row(index)
        column = self._column_of.get(self._variable_key(variable))
        if column is None:
            raise UnknownVariableError(f"Variable {variable} is not part of the solution set")
        return row[column]

    def shift_at(self, index: int, nurse: int, day: int) -> int:
        """Shift assigned to `nurse` on `day` in solution `index`."""
        return self.value_at(index, self.variables.shift[nurse][day])

    def nurse_on(self, index: int, shift: int, day: int) -> Optional[int]:
        """Nurse working `shift` on `day` in solution `index`, read through the primary view."""
        for n in range(self.variables.num_nurses):
            if self.shift_at(index, n, day) == shift:
                return n
        return None

    def assignment(self, index: int) -> List[List[int]]:
        """Solution `index` as a nurse x day matrix of shift ids."""
        self._row(index)
        return [
            [self.shift_at(index, n, d) for d in range(self.variables.num_days)]
            for n in range(self.variables.num_nurses)
        ]

    def __iter__(self) -> Iterator[List[List[int]]]:
        for index in range(len(self._rows)):
            yield self.assignment(index)

    def to_dataframe(self, index: int) -> pd.DataFrame:
        """Solution `index` as a DataFrame indexed by nurse, one column per day."""
        days = all_days(self.variables.num_days)
        return pd.DataFrame(
            self.assignment(index),
            index=pd.Index(range(self.variables.num_nurses), name="nurse"),
            columns=[day.label for day in days],
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary dictionary for display."""
        return {
            "solutions": self.count(),
            "truncated": self.truncated,
            **self.stats.to_dict(),
        }


class SolutionEnumerator:
    """Runs one exhaustive search; UNSOLVED -> SOLVING -> SOLVED (or FAILED)."""

    def __init__(self, engine: SolvingEngine, variables: RosterVariables):
        self.engine = engine
        self.variables = variables
        self.state = EnumeratorState.UNSOLVED

    def enumerate_all(
        self,
        strategy: Optional[SearchStrategy] = None,
        limits: Optional[SearchLimits] = None,
    ) -> SolutionSet:
        """
        Find every feasible roster.

        Returns:
            SolutionSet; `truncated` is set when a budget in `limits` stopped
            the search before it was exhausted.

        Raises:
            EnumeratorStateError: this enumerator already ran
            EnumerationError: the engine failed during search
        """
        if self.state != EnumeratorState.UNSOLVED:
            raise EnumeratorStateError(f"Enumerator is {self.state.value}, expected unsolved")
        strategy = strategy or SearchStrategy()
        limits = limits or SearchLimits()

        collected = self.variables.flat_shifts()
        slog.phase("Enumeration")
        slog.step(
            f"Search: {len(collected)} decision variables, "
            f"{strategy.variable_selection.value}/{strategy.value_selection.value}"
        )
        if limits.is_bounded:
            slog.detail("limits", limits)

        self.state = EnumeratorState.SOLVING
        try:
            outcome: SearchOutcome = self.engine.search_all(collected, strategy, limits)
        except EnumerationError:
            self.state = EnumeratorState.FAILED
            slog.logger.exception("Enumeration failed")
            raise
        except Exception as exc:
            self.state = EnumeratorState.FAILED
            slog.logger.exception("Enumeration failed")
            raise EnumerationError(f"Engine failure during enumeration: {exc}") from exc
        self.state = EnumeratorState.SOLVED

        stats = EnumerationStats(
            wall_time_seconds=outcome.wall_time_seconds,
            conflicts=outcome.conflicts,
            branches=outcome.branches,
            engine_status=outcome.engine_status,
        )
        column_of = {self.engine.variable_key(var): i for i, var in enumerate(collected)}
        solutions = SolutionSet(
            self.variables,
            collected,
            outcome.solutions,
            column_of,
            self.engine.variable_key,
            truncated=outcome.truncated,
            stats=stats,
        )

        slog.step(
            f"Solutions found: {solutions.count()} "
            f"(time={stats.wall_time_seconds:.3f}s, conflicts={stats.conflicts}, "
            f"branches={stats.branches})"
        )
        if solutions.truncated:
            slog.logger.warning(
                "Enumeration truncated by search limits (%s); %d solutions captured",
                outcome.engine_status, solutions.count(),
            )
        elif solutions.count() == 0:
            slog.logger.info("Model is infeasible: no roster satisfies every rule")
        return solutions


def build_roster_model(config: RosterConfig, engine: Optional[SolvingEngine] = None):
    """
    Validate `config` and build the domain model plus constraint catalog.

    Returns:
        (engine, variables)

    Raises:
        ConfigurationError: before any variable is created
    """
    config.check()
    engine = engine if engine is not None else CpSatEngine()
    variables = build_domain_model(engine, config)
    build_constraint_catalog(engine, variables, config)
    return engine, variables


def enumerate_roster(
    config: Optional[RosterConfig] = None,
    strategy: Optional[SearchStrategy] = None,
    engine: Optional[SolvingEngine] = None,
) -> SolutionSet:
    """Enumerate every roster for `config` (reference instance by default)."""
    config = config or RosterConfig()
    engine, variables = build_roster_model(config, engine)
    limits = SearchLimits(
        time_limit_seconds=config.time_limit_seconds,
        max_conflicts=config.max_conflicts,
        max_solutions=config.max_solutions,
    )
    return SolutionEnumerator(engine, variables).enumerate_all(strategy, limits)
