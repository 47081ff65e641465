"""
Constraint Catalog
==================
Business rules of the weekly roster, each posted by its own builder through
the SolvingEngine primitives. Builders never fail on an infeasible
combination of rules; infeasibility shows up as an empty enumeration.
"""
from typing import Dict, Iterable

from nurse_rota.engine.base import SolvingEngine
from nurse_rota.models.config import ContinuityFormulation, RosterConfig
from nurse_rota.models.domain import OFF_SHIFT, all_days
from nurse_rota.solver.variables import RosterVariables, VarMatrix
from nurse_rota.utils.logging_setup import SolverLogger

slog = SolverLogger("nurse_rota.solver.constraints")


def add_daily_distinctness(engine: SolvingEngine, variables: RosterVariables) -> int:
    """Add constraint: one shift per nurse and one nurse per shift on each day."""
    slog.step("Constraint: Daily distinctness (both views)")
    for d in range(variables.num_days):
        engine.add_all_different(variables.shifts_on_day(d))
        engine.add_all_different(variables.nurses_on_day(d))
    return 2 * variables.num_days


def add_workload_bounds(
    engine: SolvingEngine,
    variables: RosterVariables,
    min_off_days: int,
    max_off_days: int,
) -> int:
    """
    Add constraint: min_off_days <= off days of each nurse <= max_off_days.

    With 7 days and 5 to 6 working days this allows 1 or 2 days off.
    """
    slog.step(f"Constraint: Off days per nurse in [{min_off_days}, {max_off_days}]")
    posted = 0
    for n, row in enumerate(variables.shift):
        off = [engine.equals_literal(var, OFF_SHIFT) for var in row]
        engine.add_linear(off, ">=", min_off_days)
        engine.add_linear(off, "<=", max_off_days)
        posted += 2
    return posted


def add_works_shift_indicators(engine: SolvingEngine, variables: RosterVariables) -> VarMatrix:
    """
    Create works[n][s] == max over days of [shift[n][d] == s].

    A max equality, not a count: works is 1 whether the shift is worked
    on one day or on several.
    """
    slog.step("Variables: works[n][s] indicators")
    works = []
    for n, row in enumerate(variables.shift):
        works_row = []
        for s in range(variables.num_shifts):
            indicator = engine.new_bool_var(f"works({n},{s})")
            engine.add_max_equality(indicator, [engine.equals_literal(var, s) for var in row])
            works_row.append(indicator)
        works.append(works_row)
    variables.works = works
    return works


def add_staffing_cap(engine: SolvingEngine, variables: RosterVariables, max_nurses: int) -> int:
    """Add constraint: at most max_nurses distinct nurses work each shift s >= 1 during the week."""
    slog.step(f"Constraint: At most {max_nurses} nurses per working shift")
    if not variables.works:
        add_works_shift_indicators(engine, variables)
    posted = 0
    for s in range(1, variables.num_shifts):
        engine.add_linear([row[s] for row in variables.works], "<=", max_nurses)
        posted += 1
    return posted


def add_cyclic_continuity(
    engine: SolvingEngine,
    variables: RosterVariables,
    shifts: Iterable[int],
) -> int:
    """
    Add constraint: a nurse on a continuity shift also works it the day
    before or the day after (cyclically).

    One clause per (nurse, shift, day):
        not [shift[n][d] == s] or [shift[n][d-1] == s] or [shift[n][d+1] == s]
    """
    posted = 0
    days = all_days(variables.num_days)
    for row in variables.shift:
        for s in shifts:
            for day in days:
                engine.add_bool_or([
                    engine.equals_literal(row[day.previous.id], s),
                    engine.negate(engine.equals_literal(row[day.id], s)),
                    engine.equals_literal(row[day.next.id], s),
                ])
                posted += 1
    return posted


def add_windowed_continuity(
    engine: SolvingEngine,
    variables: RosterVariables,
    shifts: Iterable[int],
) -> int:
    """
    Same rule on the dual view, one 3-day window per starting day:

        nurse_on_shift[s][d] == nurse_on_shift[s][d+1]
        or nurse_on_shift[s][d+1] == nurse_on_shift[s][d+2]

    Windows start on every day of the cycle so the middle day covers the
    whole week.
    """
    posted = 0
    num_days = variables.num_days
    for s in shifts:
        row = variables.nurse_on_shift[s]
        for d in range(num_days):
            first, middle, last = row[d], row[(d + 1) % num_days], row[(d + 2) % num_days]
            engine.add_equality_or([(first, middle), (middle, last)])
            posted += 1
    return posted


def add_continuity(
    engine: SolvingEngine,
    variables: RosterVariables,
    shifts: Iterable[int],
    formulation: ContinuityFormulation = ContinuityFormulation.CYCLIC,
) -> int:
    """Post the continuity rule for `shifts` in the requested formulation."""
    shifts = list(shifts)
    slog.step(f"Constraint: Continuity on shifts {shifts} ({formulation.value})")
    if formulation == ContinuityFormulation.WINDOWED:
        return add_windowed_continuity(engine, variables, shifts)
    return add_cyclic_continuity(engine, variables, shifts)


def build_constraint_catalog(
    engine: SolvingEngine,
    variables: RosterVariables,
    config: RosterConfig,
) -> Dict[str, int]:
    """
    Attach every rule family to the domain model.

    Returns:
        Number of constraints posted per family.
    """
    slog.phase("Constraint catalog")
    slog.enter("rules")
    posted = {
        "distinct": add_daily_distinctness(engine, variables),
        "workload": add_workload_bounds(
            engine, variables, config.min_off_days, config.max_off_days
        ),
    }
    add_works_shift_indicators(engine, variables)
    posted["staffing"] = add_staffing_cap(engine, variables, config.max_nurses_per_shift)
    posted["continuity"] = add_continuity(
        engine, variables, config.continuity_shifts, config.continuity_formulation
    )
    for family, count in posted.items():
        slog.detail(family, count)
    slog.exit("rules")
    return posted
