"""Time grid defining the scheduling search space."""

from collections.abc import Iterator
from dataclasses import dataclass

from ..exceptions import InvalidDayCountError
from .constants import TIME_SLOTS, get_day_label, get_slot_label


@dataclass(frozen=True)
class TimeGrid:
    """Days x slots search space, scanned day-major then slot-minor."""

    num_days: int
    slots_per_day: int = len(TIME_SLOTS)

    def __post_init__(self) -> None:
        if isinstance(self.num_days, bool) or not isinstance(self.num_days, int) or self.num_days < 1:
            raise InvalidDayCountError(self.num_days)

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield every (day, slot) in scan order."""
        for day in range(self.num_days):
            for slot in range(self.slots_per_day):
                yield day, slot

    def contains(self, day: int, slot: int) -> bool:
        return 0 <= day < self.num_days and 0 <= slot < self.slots_per_day

    def has_next_slot(self, slot: int) -> bool:
        """Check if a following slot exists on the same day."""
        return slot + 1 < self.slots_per_day

    def day_label(self, day: int) -> str:
        return get_day_label(day)

    def slot_label(self, slot: int) -> str:
        return get_slot_label(slot)

    @property
    def size(self) -> int:
        return self.num_days * self.slots_per_day
