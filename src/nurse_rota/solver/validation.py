"""
Solution Validation
===================
Re-check the roster rules on a plain nurse x day matrix of shift ids,
independently of any solving engine.
"""
from typing import List, Sequence

from nurse_rota.models.config import RosterConfig
from nurse_rota.models.domain import OFF_SHIFT
from nurse_rota.utils.logging_setup import get_logger, log_constraint

logger = get_logger("nurse_rota.solver.validation")

Matrix = Sequence[Sequence[int]]


def off_days(matrix: Matrix, nurse: int) -> int:
    return sum(1 for s in matrix[nurse] if s == OFF_SHIFT)


def nurses_working(matrix: Matrix, shift: int) -> int:
    """Distinct nurses assigned `shift` at least once."""
    return sum(1 for row in matrix if shift in row)


def check_bijection(config: RosterConfig, matrix: Matrix) -> List[str]:
    errors = []
    expected = list(range(config.num_shifts))
    for d in range(config.num_days):
        day_shifts = sorted(row[d] for row in matrix)
        if day_shifts != expected:
            errors.append(f"day {d}: shifts {day_shifts} are not a permutation of {expected}")
    return errors


def check_workload(config: RosterConfig, matrix: Matrix) -> List[str]:
    errors = []
    for n in range(len(matrix)):
        off = off_days(matrix, n)
        if not config.min_off_days <= off <= config.max_off_days:
            errors.append(
                f"nurse {n}: {off} days off, expected "
                f"[{config.min_off_days}, {config.max_off_days}]"
            )
    return errors


def check_staffing(config: RosterConfig, matrix: Matrix) -> List[str]:
    errors = []
    for s in config.working_shifts:
        count = nurses_working(matrix, s)
        if count > config.max_nurses_per_shift:
            errors.append(
                f"shift {s}: worked by {count} nurses, max {config.max_nurses_per_shift}"
            )
    return errors


def check_continuity(config: RosterConfig, matrix: Matrix) -> List[str]:
    errors = []
    num_days = config.num_days
    for n, row in enumerate(matrix):
        for s in config.continuity_shifts:
            for d in range(num_days):
                if row[d] != s:
                    continue
                if row[(d - 1) % num_days] != s and row[(d + 1) % num_days] != s:
                    errors.append(f"nurse {n}: isolated shift {s} on day {d}")
    return errors


def validate_solution(config: RosterConfig, matrix: Matrix) -> List[str]:
    """
    Check every roster rule on `matrix`.

    Returns:
        List of violation messages (empty if the roster is valid).
    """
    if len(matrix) != config.num_nurses or any(len(row) != config.num_days for row in matrix):
        return [f"matrix is not {config.num_nurses} x {config.num_days}"]

    violations = []
    for name, check in (
        ("bijection", check_bijection),
        ("workload", check_workload),
        ("staffing", check_staffing),
        ("continuity", check_continuity),
    ):
        found = check(config, matrix)
        log_constraint(logger, name, not found, "; ".join(found[:3]))
        violations.extend(found)
    return violations
