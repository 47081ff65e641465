"""Tests for exhaustive enumeration with the CP-SAT engine."""
import pytest
from ortools.sat.python import cp_model

from nurse_rota.engine import cpsat
from nurse_rota.engine.base import SearchLimits, SearchStrategy, ValueSelection
from nurse_rota.engine.cpsat import CpSatEngine
from nurse_rota.exceptions import (
    EnumerationError,
    EnumeratorStateError,
    SolutionIndexError,
    UnknownVariableError,
)
from nurse_rota.models.config import ContinuityFormulation, RosterConfig
from nurse_rota.solver.enumerator import (
    EnumeratorState,
    SolutionEnumerator,
    build_roster_model,
    enumerate_roster,
)
from nurse_rota.solver.validation import validate_solution

# Distinct solutions of the reference instance, captured from the first verified run
REFERENCE_SOLUTION_COUNT = 18144


@pytest.fixture(scope="module")
def reference_solutions():
    return enumerate_roster(RosterConfig())


@pytest.mark.slow
class TestReferenceScenario:
    """4 nurses, 4 shifts, 7 days, 5-6 working days, cap 2, continuity {2, 3}."""

    def test_solution_count(self, reference_solutions):
        assert reference_solutions.count() == REFERENCE_SOLUTION_COUNT
        assert not reference_solutions.truncated

    def test_every_solution_satisfies_rules(self, reference_solutions):
        config = RosterConfig()
        for matrix in reference_solutions:
            assert validate_solution(config, matrix) == []

    def test_solutions_are_distinct(self, reference_solutions):
        seen = {tuple(map(tuple, m)) for m in reference_solutions}
        assert len(seen) == REFERENCE_SOLUTION_COUNT

    def test_sampled_indices_addressable(self, reference_solutions):
        for i in (859, 2034, 5091, 7003):
            assert len(reference_solutions.assignment(i)) == 4

    def test_windowed_formulation_same_count(self, reference_solutions):
        windowed = enumerate_roster(
            RosterConfig(continuity_formulation=ContinuityFormulation.WINDOWED)
        )
        assert windowed.count() == reference_solutions.count()


class TestSmallInstance:
    """Enumeration properties on a quickly enumerable instance."""

    def test_finds_hand_built_roster(self, small_config, small_roster):
        solutions = enumerate_roster(small_config)
        assert solutions.count() > 0
        assert small_roster in list(solutions)

    def test_every_solution_satisfies_rules(self, small_config):
        for matrix in enumerate_roster(small_config):
            assert validate_solution(small_config, matrix) == []

    def test_deterministic_order(self, small_config):
        first = list(enumerate_roster(small_config))
        second = list(enumerate_roster(small_config))
        assert first == second

    def test_continuity_formulations_agree(self, small_config):
        cyclic = enumerate_roster(small_config)
        small_config.continuity_formulation = ContinuityFormulation.WINDOWED
        windowed = enumerate_roster(small_config)
        as_set = lambda solutions: {tuple(map(tuple, m)) for m in solutions}
        assert as_set(cyclic) == as_set(windowed)

    def test_value_selection_changes_order_not_set(self, small_config):
        ascending = enumerate_roster(small_config)
        descending = enumerate_roster(
            small_config, SearchStrategy(value_selection=ValueSelection.SELECT_MAX_VALUE)
        )
        assert ascending.count() == descending.count()
        assert sorted(ascending) == sorted(descending)

    def test_stats_reported(self, small_config):
        summary = enumerate_roster(small_config).summary()
        assert summary["engine_status"] == "OPTIMAL"
        assert summary["truncated"] is False
        assert summary["wall_time_seconds"] >= 0


class TestInfeasible:
    """Infeasibility is an empty result, not an error."""

    def test_no_nurse_allowed_on_any_shift(self):
        config = RosterConfig(max_nurses_per_shift=0, min_working_days=0)
        solutions = enumerate_roster(config)
        assert solutions.count() == 0
        assert not solutions.truncated

    def test_workload_incompatible_with_daily_rest(self):
        # Exactly one nurse rests per day (7 rest days) but 4 nurses x 1 = 4
        solutions = enumerate_roster(RosterConfig(min_working_days=6, max_working_days=6))
        assert solutions.count() == 0

    def test_more_nurses_than_shifts(self):
        solutions = enumerate_roster(RosterConfig(num_nurses=5, max_nurses_per_shift=3))
        assert solutions.count() == 0


class TestIndexAccess:
    """value_at and friends on a solved model."""

    @pytest.fixture
    def solutions(self, small_config):
        return enumerate_roster(small_config)

    def test_every_index_readable(self, solutions):
        variable = solutions.variables.shift[0][0]
        for i in range(solutions.count()):
            assert 0 <= solutions.value_at(i, variable) < 3

    def test_index_equal_to_count_fails(self, solutions):
        with pytest.raises(SolutionIndexError):
            solutions.value_at(solutions.count(), solutions.variables.shift[0][0])

    def test_negative_index_fails(self, solutions):
        with pytest.raises(IndexError):
            solutions.shift_at(-1, 0, 0)

    def test_uncollected_variable(self, solutions):
        with pytest.raises(UnknownVariableError):
            solutions.value_at(0, solutions.variables.nurse_on_shift[0][0])

    def test_nurse_on_inverts_shift_at(self, solutions):
        for d in range(5):
            for n in range(3):
                s = solutions.shift_at(0, n, d)
                assert solutions.nurse_on(0, s, d) == n

    def test_dataframe(self, solutions):
        df = solutions.to_dataframe(0)
        assert df.shape == (3, 5)
        assert df.index.name == "nurse"
        assert df.values.tolist() == solutions.assignment(0)


class TestTruncation:
    """Budgets yield partial results flagged as truncated."""

    def test_max_solutions(self, small_config):
        small_config.max_solutions = 2
        solutions = enumerate_roster(small_config)
        assert solutions.count() == 2
        assert solutions.truncated

    def test_truncated_prefix_of_full_order(self, small_config):
        full = list(enumerate_roster(small_config))
        small_config.max_solutions = 3
        partial = list(enumerate_roster(small_config))
        assert partial == full[:3]

    def test_conflict_budget(self):
        solutions = enumerate_roster(RosterConfig(max_conflicts=1))
        assert solutions.truncated is True
        assert solutions.stats.engine_status == "UNKNOWN"

    def test_time_budget(self):
        solutions = enumerate_roster(RosterConfig(time_limit_seconds=0.001))
        assert solutions.truncated is True
        assert solutions.stats.engine_status == "UNKNOWN"

    def test_empty_truncated_result_is_not_infeasible(self):
        # Budget exhausted before any roster was found
        truncated = enumerate_roster(RosterConfig(max_conflicts=1))
        infeasible = enumerate_roster(RosterConfig(min_working_days=6, max_working_days=6))
        assert truncated.count() == 0 and truncated.truncated
        assert infeasible.count() == 0 and not infeasible.truncated


class TestEnumeratorLifecycle:
    """UNSOLVED -> SOLVING -> SOLVED, and failures."""

    def test_states(self, small_config):
        engine, variables = build_roster_model(small_config)
        enumerator = SolutionEnumerator(engine, variables)
        assert enumerator.state == EnumeratorState.UNSOLVED
        enumerator.enumerate_all()
        assert enumerator.state == EnumeratorState.SOLVED

    def test_second_run_rejected(self, small_config):
        engine, variables = build_roster_model(small_config)
        enumerator = SolutionEnumerator(engine, variables)
        enumerator.enumerate_all()
        with pytest.raises(EnumeratorStateError):
            enumerator.enumerate_all()

    def test_engine_failure_is_not_infeasibility(self, small_config):
        class BrokenEngine(CpSatEngine):
            def search_all(self, variables, strategy, limits):
                raise RuntimeError("search crashed")

        engine, variables = build_roster_model(small_config, BrokenEngine())
        enumerator = SolutionEnumerator(engine, variables)
        with pytest.raises(EnumerationError) as exc_info:
            enumerator.enumerate_all(SearchStrategy(), SearchLimits())
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert enumerator.state == EnumeratorState.FAILED

    def test_callback_failure_mid_search(self, small_config, monkeypatch):
        class FailingList(list):
            def append(self, item):
                if len(self) == 2:
                    raise RuntimeError("disk full")
                super().append(item)

        class FailingCollector(cpsat._SolutionCollector):
            def __init__(self, variables, max_solutions):
                super().__init__(variables, max_solutions)
                self.solutions = FailingList()

        monkeypatch.setattr(cpsat, "_SolutionCollector", FailingCollector)
        engine, variables = build_roster_model(small_config)
        enumerator = SolutionEnumerator(engine, variables)
        with pytest.raises(EnumerationError) as exc_info:
            enumerator.enumerate_all()
        assert "disk full" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert enumerator.state == EnumeratorState.FAILED

    def test_invalid_model_raises(self, small_config, monkeypatch):
        monkeypatch.setattr(
            cp_model.CpSolver, "Solve",
            lambda self, model, solution_callback=None: cp_model.MODEL_INVALID,
        )
        engine, variables = build_roster_model(small_config)
        enumerator = SolutionEnumerator(engine, variables)
        with pytest.raises(EnumerationError) as exc_info:
            enumerator.enumerate_all()
        assert exc_info.value.status == "MODEL_INVALID"
        assert enumerator.state == EnumeratorState.FAILED

    def test_recording_engine_substitutes(self, recording_engine, small_config):
        engine, variables = build_roster_model(small_config, recording_engine)
        solutions = SolutionEnumerator(engine, variables).enumerate_all()
        assert solutions.count() == 0
        assert solutions.stats.engine_status == "RECORDED"
