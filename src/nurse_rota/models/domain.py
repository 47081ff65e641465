"""Identities of the rostering domain: nurses, shifts and days."""
from dataclasses import dataclass
from typing import List

OFF_SHIFT = 0

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class Nurse:
    id: int

    @property
    def label(self) -> str:
        return f"Nurse {self.id}"


@dataclass(frozen=True)
class Shift:
    id: int

    @property
    def is_off(self) -> bool:
        """True for the sentinel shift meaning "not working"."""
        return self.id == OFF_SHIFT

    @property
    def label(self) -> str:
        return "off" if self.is_off else f"shift {self.id}"


@dataclass(frozen=True)
class Day:
    """A day of the roster; neighbours wrap around the week."""
    id: int
    num_days: int

    @property
    def previous(self) -> "Day":
        return Day((self.id - 1) % self.num_days, self.num_days)

    @property
    def next(self) -> "Day":
        return Day((self.id + 1) % self.num_days, self.num_days)

    @property
    def label(self) -> str:
        if self.num_days == len(DAY_LABELS):
            return DAY_LABELS[self.id]
        return f"Day {self.id}"


def all_days(num_days: int) -> List[Day]:
    return [Day(d, num_days) for d in range(num_days)]
