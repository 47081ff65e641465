"""
Domain Model
============
Builds the variable universe of a weekly roster and channels the two views
of the same nurse/shift relation:

    shift[n][d]           shift worked by nurse n on day d, in [0, num_shifts-1]
    nurse_on_shift[s][d]  nurse working shift s on day d, in [0, num_nurses-1]
"""
from dataclasses import dataclass, field
from typing import Any, List

from nurse_rota.engine.base import SolvingEngine
from nurse_rota.models.config import RosterConfig
from nurse_rota.utils.logging_setup import SolverLogger, log_function_call

slog = SolverLogger("nurse_rota.solver.variables")

# [row][day] matrices of engine variables
VarMatrix = List[List[Any]]


@dataclass
class RosterVariables:
    """Every engine variable of one roster model."""
    config: RosterConfig
    shift: VarMatrix
    nurse_on_shift: VarMatrix
    works: VarMatrix = field(default_factory=list)  # [n][s], set by the catalog

    @property
    def num_nurses(self) -> int:
        return len(self.shift)

    @property
    def num_days(self) -> int:
        return len(self.shift[0]) if self.shift else 0

    @property
    def num_shifts(self) -> int:
        return len(self.nurse_on_shift)

    def shifts_on_day(self, d: int) -> List[Any]:
        """shift[n][d] for every nurse, in nurse order."""
        return [row[d] for row in self.shift]

    def nurses_on_day(self, d: int) -> List[Any]:
        """nurse_on_shift[s][d] for every shift, in shift order."""
        return [row[d] for row in self.nurse_on_shift]

    def flat_shifts(self) -> List[Any]:
        """Assignment variables in declared order: nurse-major, then day."""
        return [var for row in self.shift for var in row]


def create_assignment_variables(
    engine: SolvingEngine,
    num_nurses: int,
    num_days: int,
    num_shifts: int,
) -> VarMatrix:
    """Create shift[n][d] with domain [0, num_shifts-1]."""
    return [
        [engine.new_int_var(0, num_shifts - 1, f"shift({n},{d})") for d in range(num_days)]
        for n in range(num_nurses)
    ]


def create_inverse_variables(
    engine: SolvingEngine,
    num_shifts: int,
    num_days: int,
    num_nurses: int,
) -> VarMatrix:
    """Create nurse_on_shift[s][d] with domain [0, num_nurses-1]."""
    return [
        [engine.new_int_var(0, num_nurses - 1, f"nurse_on_shift({s},{d})") for d in range(num_days)]
        for s in range(num_shifts)
    ]


@log_function_call
def link_views(engine: SolvingEngine, shift: VarMatrix, nurse_on_shift: VarMatrix) -> int:
    """
    Channel the two views with nurse_on_shift[shift[n][d]][d] == n.

    Posted for every (nurse, day) pair; leaving any pair out lets the views
    drift apart and breaks the per-day bijection.

    Returns:
        Number of element constraints posted.
    """
    num_days = len(shift[0]) if shift else 0
    posted = 0
    for d in range(num_days):
        nurses_for_day = [row[d] for row in nurse_on_shift]
        for n, row in enumerate(shift):
            engine.add_element(row[d], nurses_for_day, n)
            posted += 1
    return posted


def build_domain_model(engine: SolvingEngine, config: RosterConfig) -> RosterVariables:
    """Create both views for `config` and link them."""
    slog.step(
        f"Domain model: {config.num_nurses} nurses x {config.num_shifts} shifts "
        f"x {config.num_days} days"
    )
    shift = create_assignment_variables(
        engine, config.num_nurses, config.num_days, config.num_shifts
    )
    nurse_on_shift = create_inverse_variables(
        engine, config.num_shifts, config.num_days, config.num_nurses
    )
    if config.num_nurses != config.num_shifts:
        slog.logger.warning(
            "num_nurses (%d) != num_shifts (%d): the daily bijection cannot hold, "
            "enumeration will find no solution",
            config.num_nurses, config.num_shifts,
        )
    posted = link_views(engine, shift, nurse_on_shift)
    slog.detail("channeling constraints", posted)
    return RosterVariables(config=config, shift=shift, nurse_on_shift=nurse_on_shift)
