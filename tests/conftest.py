"""Pytest configuration and fixtures."""
import sys
from collections import Counter
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from nurse_rota.engine.base import EngineStatus, SearchOutcome, SolvingEngine
from nurse_rota.models.config import RosterConfig


class RecordingEngine(SolvingEngine):
    """Engine double that records posted primitives instead of solving."""

    def __init__(self):
        self.calls = Counter()
        self.variables = []
        self.elements = []
        self._literals = {}

    def new_int_var(self, lb, ub, name):
        var = ("int", len(self.variables), lb, ub, name)
        self.variables.append(var)
        return var

    def new_bool_var(self, name):
        return self.new_int_var(0, 1, name)

    def equals_literal(self, var, value):
        key = (var[1], value)
        if key not in self._literals:
            self._literals[key] = self.new_bool_var(f"{var[4]}=={value}")
        return self._literals[key]

    def negate(self, literal):
        return ("not", literal)

    def add_linear(self, terms, op, bound):
        self.calls[f"linear{op}"] += 1

    def add_all_different(self, variables):
        self.calls["all_different"] += 1

    def add_bool_or(self, literals):
        self.calls["bool_or"] += 1

    def add_element(self, index, array, target):
        self.calls["element"] += 1
        self.elements.append((index, tuple(array), target))

    def add_max_equality(self, target, variables):
        self.calls["max_equality"] += 1

    def add_equality_or(self, pairs):
        self.calls["equality_or"] += 1

    def search_all(self, variables, strategy, limits):
        return SearchOutcome(status=EngineStatus.EXHAUSTED, engine_status="RECORDED")

    def variable_key(self, var):
        return var[1]


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def reference_config():
    """The 4 nurse / 4 shift / 7 day reference instance."""
    return RosterConfig()


@pytest.fixture
def small_config():
    """3 nurses, 3 shifts, 5 days; small enough to enumerate in every test."""
    return RosterConfig(
        num_nurses=3,
        num_shifts=3,
        num_days=5,
        min_working_days=3,
        max_working_days=4,
        max_nurses_per_shift=2,
        continuity_shifts=(2,),
    )


@pytest.fixture
def small_roster():
    """A hand-built roster valid for small_config (nurse x day)."""
    return [
        [2, 2, 0, 1, 1],
        [0, 0, 2, 2, 2],
        [1, 1, 1, 0, 0],
    ]
