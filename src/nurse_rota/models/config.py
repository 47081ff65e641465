"""Roster configuration and structural checks."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from nurse_rota.exceptions import ConfigurationError


class ContinuityFormulation(str, Enum):
    """How the continuity rule is posted to the engine."""
    CYCLIC = "cyclic"  # One clause per (nurse, shift, day) on the primary view
    WINDOWED = "windowed"  # Overlapping 3-day windows on the dual view


@dataclass
class RosterConfig:
    """Configuration for one weekly roster enumeration.

    Defaults reproduce the reference instance: 4 nurses, 4 shifts
    (shift 0 is "off"), 7 days, 5 or 6 working days each, at most 2
    nurses on any working shift during the week, and shifts 2 and 3
    worked in blocks of at least two days.
    """

    # Sizes
    num_nurses: int = 4
    num_shifts: int = 4  # Shift 0 is reserved as "not working"
    num_days: int = 7

    # Workload
    min_working_days: int = 5
    max_working_days: int = 6

    # Staffing
    max_nurses_per_shift: int = 2
    continuity_shifts: Tuple[int, ...] = (2, 3)
    continuity_formulation: ContinuityFormulation = ContinuityFormulation.CYCLIC

    # Search budget (None = unlimited)
    time_limit_seconds: Optional[float] = None
    max_conflicts: Optional[int] = None
    max_solutions: Optional[int] = None

    def __post_init__(self):
        self.continuity_shifts = tuple(sorted(set(int(s) for s in self.continuity_shifts)))
        if isinstance(self.continuity_formulation, str):
            self.continuity_formulation = ContinuityFormulation(self.continuity_formulation)

    @property
    def min_off_days(self) -> int:
        return self.num_days - self.max_working_days

    @property
    def max_off_days(self) -> int:
        return self.num_days - self.min_working_days

    @property
    def working_shifts(self) -> List[int]:
        return list(range(1, self.num_shifts))

    def validate(self) -> List[str]:
        """
        Collect every structural problem with this configuration.

        Returns:
            List of error messages (empty if valid).
        """
        errors = []
        for name in ("num_nurses", "num_shifts", "num_days"):
            if getattr(self, name) < 1:
                errors.append(f"{name} must be positive, got {getattr(self, name)}")
        if self.num_shifts == 1:
            errors.append("num_shifts must include at least one working shift besides 0")

        if self.min_working_days < 0 or self.max_working_days < 0:
            errors.append("working-day bounds must be non-negative")
        if self.min_working_days > self.max_working_days:
            errors.append(
                f"min_working_days ({self.min_working_days}) exceeds "
                f"max_working_days ({self.max_working_days})"
            )
        if self.num_days > 0 and self.max_working_days > self.num_days:
            errors.append(
                f"max_working_days ({self.max_working_days}) exceeds num_days ({self.num_days})"
            )

        if self.max_nurses_per_shift < 0:
            errors.append("max_nurses_per_shift must be non-negative")
        elif (
            self.min_working_days > 0
            and self.num_shifts > 1
            and self.max_nurses_per_shift * (self.num_shifts - 1) < self.num_nurses
        ):
            # Every nurse works, so each needs at least one working shift
            errors.append(
                f"max_nurses_per_shift ({self.max_nurses_per_shift}) x working shifts "
                f"({self.num_shifts - 1}) cannot cover {self.num_nurses} nurses"
            )

        for s in self.continuity_shifts:
            if not 1 <= s < max(self.num_shifts, 1):
                errors.append(f"continuity shift {s} is not a working shift")

        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            errors.append("time_limit_seconds must be positive")
        if self.max_conflicts is not None and self.max_conflicts < 0:
            errors.append("max_conflicts must be non-negative")
        if self.max_solutions is not None and self.max_solutions < 1:
            errors.append("max_solutions must be at least 1")
        return errors

    def check(self) -> "RosterConfig":
        """Raise ConfigurationError if validate() reports anything."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)
        return self

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "num_nurses": self.num_nurses,
            "num_shifts": self.num_shifts,
            "num_days": self.num_days,
            "min_working_days": self.min_working_days,
            "max_working_days": self.max_working_days,
            "max_nurses_per_shift": self.max_nurses_per_shift,
            "continuity_shifts": list(self.continuity_shifts),
            "continuity_formulation": self.continuity_formulation.value,
            "time_limit_seconds": self.time_limit_seconds,
            "max_conflicts": self.max_conflicts,
            "max_solutions": self.max_solutions,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "RosterConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = cls().to_dict().keys()
        return cls(**{k: v for k, v in d.items() if k in known})
