# nurse_rota/models - Configuration and domain identities
from .config import ContinuityFormulation, RosterConfig
from .domain import DAY_LABELS, OFF_SHIFT, Day, Nurse, Shift, all_days
from .validated import ValidatedRosterConfig

__all__ = [
    "RosterConfig", "ContinuityFormulation",
    "ValidatedRosterConfig",
    "Nurse", "Shift", "Day", "OFF_SHIFT", "DAY_LABELS",
    "all_days",
]
