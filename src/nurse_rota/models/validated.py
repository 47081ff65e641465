"""
Pydantic Validated Models
=========================
Validation layer for roster configuration at API and CLI boundaries.

Usage:
    from nurse_rota.models.validated import ValidatedRosterConfig

    config = ValidatedRosterConfig(num_nurses=4, num_shifts=4).to_dataclass()

The dataclass RosterConfig stays the type the solver consumes.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ContinuityFormulationEnum(str, Enum):
    """Continuity rule formulations."""
    CYCLIC = "cyclic"
    WINDOWED = "windowed"


class ValidatedRosterConfig(BaseModel):
    """
    Pydantic-validated roster configuration.

    Use this for strict validation at API boundaries.
    Can be converted to/from the dataclass RosterConfig.
    """
    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    # Sizes
    num_nurses: int = Field(default=4, ge=1, description="Number of nurses")
    num_shifts: int = Field(default=4, ge=2, description="Shifts per day, 0 = off")
    num_days: int = Field(default=7, ge=1)

    # Workload
    min_working_days: int = Field(default=5, ge=0)
    max_working_days: int = Field(default=6, ge=0)

    # Staffing
    max_nurses_per_shift: int = Field(default=2, ge=0)
    continuity_shifts: List[int] = Field(default_factory=lambda: [2, 3])
    continuity_formulation: ContinuityFormulationEnum = Field(
        default=ContinuityFormulationEnum.CYCLIC
    )

    # Search budget
    time_limit_seconds: Optional[float] = Field(default=None, gt=0)
    max_conflicts: Optional[int] = Field(default=None, ge=0)
    max_solutions: Optional[int] = Field(default=None, ge=1)

    @field_validator("continuity_shifts")
    @classmethod
    def validate_continuity_shifts(cls, v: List[int]) -> List[int]:
        """Shift 0 is never a continuity shift."""
        if any(s < 1 for s in v):
            raise ValueError("continuity shifts must be working shifts (>= 1)")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_model(self):
        """Cross-field validation, shared with RosterConfig.validate()."""
        errors = self.to_dataclass().validate()
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def to_dataclass(self):
        """Convert to dataclass RosterConfig for solver compatibility."""
        from nurse_rota.models.config import ContinuityFormulation, RosterConfig

        return RosterConfig(
            num_nurses=self.num_nurses,
            num_shifts=self.num_shifts,
            num_days=self.num_days,
            min_working_days=self.min_working_days,
            max_working_days=self.max_working_days,
            max_nurses_per_shift=self.max_nurses_per_shift,
            continuity_shifts=tuple(self.continuity_shifts),
            continuity_formulation=ContinuityFormulation(self.continuity_formulation),
            time_limit_seconds=self.time_limit_seconds,
            max_conflicts=self.max_conflicts,
            max_solutions=self.max_solutions,
        )

    @classmethod
    def from_dataclass(cls, config) -> "ValidatedRosterConfig":
        """Create from dataclass RosterConfig."""
        return cls(**config.to_dict())
