"""Scheduling ledger: room occupancy and latest subject placements."""

from collections import defaultdict

from ..exceptions import RoomAlreadyBookedError


class SchedulingLedger:
    """Mutable state of a single scheduling run.

    Maintains two records consulted by conflict and room checks:
    - room_usage: day -> slot -> set of occupied room identifiers
    - subject_placement: subject -> its most recent (day, slot)

    Only the latest placement of a subject is kept. A subject placed more
    than once (for example partly in the pinned phase and partly in the
    individual phase) exposes only its last placement to conflict checks.
    """

    def __init__(self) -> None:
        self.room_usage: dict[int, dict[int, set[str]]] = defaultdict(lambda: defaultdict(set))
        self.subject_placement: dict[str, tuple[int, int]] = {}

    def occupied_rooms(self, day: int, slot: int) -> set[str]:
        """Get rooms occupied at (day, slot). Does not create entries."""
        if day not in self.room_usage or slot not in self.room_usage[day]:
            return set()
        return self.room_usage[day][slot]

    def is_room_available(self, room: str, day: int, slot: int) -> bool:
        return room not in self.occupied_rooms(day, slot)

    def occupy(self, room: str, day: int, slot: int) -> None:
        """Book a room at (day, slot).

        Raises:
            RoomAlreadyBookedError: If the room is already booked there
        """
        if not self.is_room_available(room, day, slot):
            raise RoomAlreadyBookedError(room, day, slot)
        self.room_usage[day][slot].add(room)

    def record_subject(self, subject: str, day: int, slot: int) -> None:
        """Record (day, slot) as the current placement of a subject."""
        self.subject_placement[subject] = (day, slot)

    def placement_of(self, subject: str) -> tuple[int, int] | None:
        return self.subject_placement.get(subject)

    @property
    def booked_count(self) -> int:
        """Total number of (day, slot, room) bookings."""
        return sum(len(rooms) for slots in self.room_usage.values() for rooms in slots.values())
