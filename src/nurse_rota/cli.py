from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List

from pydantic import ValidationError

from nurse_rota.exceptions import ConfigurationError, EnumerationError
from nurse_rota.models.domain import Nurse, Shift, all_days
from nurse_rota.models.validated import ValidatedRosterConfig
from nurse_rota.solver.enumerator import SolutionSet, enumerate_roster
from nurse_rota.solver.validation import validate_solution
from nurse_rota.utils.logging_setup import get_logger, setup_logging

logger = get_logger("nurse_rota.cli")

# Indices sampled from the reference enumeration
DEFAULT_SAMPLES = [859, 2034, 5091, 7003]


def _build_cfg(args: argparse.Namespace) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {
        "num_nurses": args.nurses,
        "num_shifts": args.shifts,
        "num_days": args.days,
        "min_working_days": args.min_work,
        "max_working_days": args.max_work,
        "max_nurses_per_shift": args.max_per_shift,
        "continuity_shifts": args.continuity,
        "continuity_formulation": args.formulation,
    }
    if args.time_limit is not None:
        cfg["time_limit_seconds"] = args.time_limit
    if args.max_solutions is not None:
        cfg["max_solutions"] = args.max_solutions
    return cfg


def render_solution(solutions: SolutionSet, index: int) -> str:
    """Per-day listing of solution `index`."""
    lines = [f"Solution number {index}", ""]
    for day in all_days(solutions.variables.num_days):
        lines.append(f"{day.label}")
        for n in range(solutions.variables.num_nurses):
            shift = Shift(solutions.shift_at(index, n, day.id))
            lines.append(f"  {Nurse(n).label} assigned to {shift.label}")
    return "\n".join(lines)


def _sample_indices(solutions: SolutionSet, requested: List[int]) -> List[int]:
    kept = [i for i in requested if 0 <= i < solutions.count()]
    skipped = sorted(set(requested) - set(kept))
    if skipped:
        logger.warning(f"Skipping sample indices beyond {solutions.count()} solutions: {skipped}")
    return kept


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Enumerate every feasible weekly nurse roster")
    p.add_argument("--nurses", type=int, default=4, help="Number of nurses (default: 4)")
    p.add_argument("--shifts", type=int, default=4, help="Shifts per day including 0 = off (default: 4)")
    p.add_argument("--days", type=int, default=7, help="Days in the cycle (default: 7)")
    p.add_argument("--min-work", type=int, default=5, help="Minimum working days per nurse")
    p.add_argument("--max-work", type=int, default=6, help="Maximum working days per nurse")
    p.add_argument("--max-per-shift", type=int, default=2, help="Max nurses on a shift per week")
    p.add_argument("--continuity", type=int, nargs="*", default=[2, 3], help="Shifts worked in blocks of 2+ days")
    p.add_argument("--formulation", choices=["cyclic", "windowed"], default="cyclic")
    p.add_argument("--time-limit", type=float, default=None, help="Search time budget in seconds")
    p.add_argument("--max-solutions", type=int, default=None, help="Stop after this many solutions")
    p.add_argument("--sample", type=int, nargs="*", default=DEFAULT_SAMPLES, help="Solution indices to print")
    p.add_argument("--verify", action="store_true", help="Re-check every solution without the engine")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output (summary)")
    p.add_argument("--log-file", default=None)
    p.add_argument("-v", "--verbose", action="count", default=0)
    args = p.parse_args(argv)

    level = {0: "WARNING", 1: "INFO"}.get(args.verbose, "DEBUG")
    setup_logging(level=level, log_file=args.log_file)

    try:
        config = ValidatedRosterConfig(**_build_cfg(args)).to_dataclass()
        solutions = enumerate_roster(config)
    except (ValidationError, ConfigurationError) as e:
        print(f"Configuration rejected: {e}", file=sys.stderr)
        return 2
    except EnumerationError as e:
        print(f"Enumeration failed: {e}", file=sys.stderr)
        return 1

    invalid = 0
    if args.verify:
        invalid = sum(1 for matrix in solutions if validate_solution(config, matrix))

    samples = _sample_indices(solutions, args.sample)
    if args.json_out:
        out = {
            "summary": solutions.summary(),
            "samples": {str(i): solutions.assignment(i) for i in samples},
        }
        if args.verify:
            out["invalid"] = invalid
        print(json.dumps(out, indent=2))
    else:
        print(f"Solutions found: {solutions.count()}" + (" (truncated)" if solutions.truncated else ""))
        for k, v in solutions.stats.to_dict().items():
            print(f" - {k}: {v}")
        if args.verify:
            print(f" - invalid solutions: {invalid}")
        for i in samples:
            print()
            print(render_solution(solutions, i))
    return 1 if invalid else 0


if __name__ == "__main__":
    raise SystemExit(main())
