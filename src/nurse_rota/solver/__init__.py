# nurse_rota/solver - Roster model, constraint catalog and solution enumeration
from .constraints import (
    add_continuity,
    add_cyclic_continuity,
    add_daily_distinctness,
    add_staffing_cap,
    add_windowed_continuity,
    add_workload_bounds,
    add_works_shift_indicators,
    build_constraint_catalog,
)
from .enumerator import (
    EnumerationStats,
    EnumeratorState,
    SolutionEnumerator,
    SolutionSet,
    build_roster_model,
    enumerate_roster,
)
from .validation import validate_solution
from .variables import (
    RosterVariables,
    build_domain_model,
    create_assignment_variables,
    create_inverse_variables,
    link_views,
)

__all__ = [
    "RosterVariables",
    "create_assignment_variables",
    "create_inverse_variables",
    "link_views",
    "build_domain_model",
    "add_daily_distinctness",
    "add_workload_bounds",
    "add_works_shift_indicators",
    "add_staffing_cap",
    "add_cyclic_continuity",
    "add_windowed_continuity",
    "add_continuity",
    "build_constraint_catalog",
    "SolutionEnumerator",
    "SolutionSet",
    "EnumeratorState",
    "EnumerationStats",
    "build_roster_model",
    "enumerate_roster",
    "validate_solution",
]
