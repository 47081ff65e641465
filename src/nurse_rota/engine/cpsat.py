"""OR-Tools CP-SAT implementation of the solving engine."""
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ortools.sat.python import cp_model

from nurse_rota.engine.base import (
    COMPARISONS,
    EngineStatus,
    SearchLimits,
    SearchOutcome,
    SearchStrategy,
    SolvingEngine,
    ValueSelection,
    VariableSelection,
)
from nurse_rota.exceptions import EnumerationError
from nurse_rota.utils.logging_setup import get_logger

logger = get_logger("nurse_rota.engine.cpsat")

_VARIABLE_SELECTION = {
    VariableSelection.CHOOSE_FIRST: cp_model.CHOOSE_FIRST,
}

_VALUE_SELECTION = {
    ValueSelection.SELECT_MIN_VALUE: cp_model.SELECT_MIN_VALUE,
    ValueSelection.SELECT_MAX_VALUE: cp_model.SELECT_MAX_VALUE,
}


class _SolutionCollector(cp_model.CpSolverSolutionCallback):
    """Record the values of the collected variables for every solution."""

    def __init__(self, variables: Sequence[cp_model.IntVar], max_solutions: Optional[int]):
        cp_model.CpSolverSolutionCallback.__init__(self)
        self._variables = list(variables)
        self._max_solutions = max_solutions
        self.solutions: List[Tuple[int, ...]] = []
        self.error: Optional[Exception] = None

    def on_solution_callback(self):
        try:
            self.solutions.append(tuple(int(self.Value(v)) for v in self._variables))
        except Exception as exc:
            # Exceptions cannot cross the native search loop; re-raised by search_all
            self.error = exc
            self.StopSearch()
            return
        if self._max_solutions is not None and len(self.solutions) >= self._max_solutions:
            self.StopSearch()


class CpSatEngine(SolvingEngine[cp_model.IntVar]):
    """Solving engine backed by a single CP-SAT model."""

    def __init__(self):
        self.model = cp_model.CpModel()
        self._literals: Dict[Tuple[int, int], cp_model.IntVar] = {}

    def new_int_var(self, lb: int, ub: int, name: str) -> cp_model.IntVar:
        return self.model.NewIntVar(lb, ub, name)

    def new_bool_var(self, name: str) -> cp_model.IntVar:
        return self.model.NewBoolVar(name)

    def equals_literal(self, var: cp_model.IntVar, value: int) -> cp_model.IntVar:
        key = (var.Index(), value)
        literal = self._literals.get(key)
        if literal is None:
            literal = self.model.NewBoolVar(f"{var.Name()}=={value}")
            self.model.Add(var == value).OnlyEnforceIf(literal)
            self.model.Add(var != value).OnlyEnforceIf(literal.Not())
            self._literals[key] = literal
        return literal

    def negate(self, literal: cp_model.IntVar):
        return literal.Not()

    def add_linear(self, terms: Sequence[cp_model.IntVar], op: str, bound: int) -> None:
        if op not in COMPARISONS:
            raise ValueError(f"Unsupported comparison {op!r}, expected one of {COMPARISONS}")
        expr = sum(terms)
        if op == "<=":
            self.model.Add(expr <= bound)
        elif op == ">=":
            self.model.Add(expr >= bound)
        else:
            self.model.Add(expr == bound)

    def add_all_different(self, variables: Sequence[cp_model.IntVar]) -> None:
        self.model.AddAllDifferent(list(variables))

    def add_bool_or(self, literals: Sequence[cp_model.IntVar]) -> None:
        self.model.AddBoolOr(list(literals))

    def add_element(
        self,
        index: cp_model.IntVar,
        array: Sequence[cp_model.IntVar],
        target: Union[cp_model.IntVar, int],
    ) -> None:
        self.model.AddElement(index, list(array), target)

    def add_max_equality(self, target: cp_model.IntVar, variables: Sequence[cp_model.IntVar]) -> None:
        self.model.AddMaxEquality(target, list(variables))

    def add_equality_or(self, pairs: Sequence[Tuple[cp_model.IntVar, cp_model.IntVar]]) -> None:
        literals = []
        for a, b in pairs:
            same = self.model.NewBoolVar(f"{a.Name()}=={b.Name()}")
            self.model.Add(a == b).OnlyEnforceIf(same)
            self.model.Add(a != b).OnlyEnforceIf(same.Not())
            literals.append(same)
        self.model.AddBoolOr(literals)

    def variable_key(self, var: cp_model.IntVar) -> int:
        return var.Index()

    def search_all(
        self,
        variables: Sequence[cp_model.IntVar],
        strategy: SearchStrategy,
        limits: SearchLimits,
    ) -> SearchOutcome:
        variables = list(variables)
        self.model.AddDecisionStrategy(
            variables,
            _VARIABLE_SELECTION[strategy.variable_selection],
            _VALUE_SELECTION[strategy.value_selection],
        )

        solver = cp_model.CpSolver()
        solver.parameters.enumerate_all_solutions = True
        # One worker and fixed branching keep the solution order reproducible
        solver.parameters.num_workers = 1
        solver.parameters.search_branching = cp_model.FIXED_SEARCH
        if limits.time_limit_seconds is not None:
            solver.parameters.max_time_in_seconds = float(limits.time_limit_seconds)
        if limits.max_conflicts is not None:
            solver.parameters.max_number_of_conflicts = int(limits.max_conflicts)

        collector = _SolutionCollector(variables, limits.max_solutions)
        try:
            status = solver.Solve(self.model, collector)
        except Exception as exc:
            raise EnumerationError(f"CP-SAT search failed: {exc}") from exc

        status_name = solver.StatusName(status)
        if collector.error is not None:
            raise EnumerationError(
                f"Solution callback failed: {collector.error}", status=status_name
            ) from collector.error
        if status == cp_model.MODEL_INVALID:
            raise EnumerationError(
                f"CP-SAT rejected the model: {self.model.Validate()}", status=status_name
            )

        if status in (cp_model.OPTIMAL, cp_model.INFEASIBLE):
            engine_status = EngineStatus.EXHAUSTED
        else:
            engine_status = EngineStatus.TRUNCATED

        logger.debug(
            f"CP-SAT finished: status={status_name}, solutions={len(collector.solutions)}"
        )
        return SearchOutcome(
            status=engine_status,
            solutions=collector.solutions,
            wall_time_seconds=solver.WallTime(),
            conflicts=solver.NumConflicts(),
            branches=solver.NumBranches(),
            engine_status=status_name,
        )
