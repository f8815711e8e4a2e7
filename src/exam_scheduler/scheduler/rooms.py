"""Room eligibility and availability for exam placement."""

import re

from .classifier import is_arch
from .constants import (
    ARCH_BUILDINGS,
    DEFAULT_BUILDINGS,
    DEPARTMENT_BUILDINGS,
    ROOM_BUILDING_PATTERN,
    TIME_SLOTS,
)
from .ledger import SchedulingLedger
from .models import ExamSection

_BUILDING_RE = re.compile(ROOM_BUILDING_PATTERN)


def get_building_from_room(room: str) -> str:
    """Extract the building prefix from a room identifier.

    Examples:
        'N-201' -> 'N'
        'AB-3' -> 'AB'
        'lab 4' -> ''
    """
    match = _BUILDING_RE.match(room)
    return match.group(1) if match else ""


def get_allowed_buildings(dept: str, subject_id: str) -> list[str]:
    """Get buildings a subject may be examined in.

    Architecture subjects go to the architecture building and its fallback.
    Otherwise the department is matched by substring against the
    department table; unmatched departments may use every building.

    Args:
        dept: Owning department code
        subject_id: Subject identifier

    Returns:
        Ordered, non-empty list of building prefixes
    """
    if is_arch(subject_id):
        return list(ARCH_BUILDINGS)

    dept_upper = dept.upper()
    for keywords, buildings in DEPARTMENT_BUILDINGS:
        if any(keyword in dept_upper for keyword in keywords):
            return list(buildings)

    return list(DEFAULT_BUILDINGS)


def is_room_eligible(room: str, dept: str, subject_id: str) -> bool:
    """Check if a room's building is allowed for a department/subject."""
    return get_building_from_room(room) in get_allowed_buildings(dept, subject_id)


def get_eligible_rooms(section: ExamSection, all_rooms: list[str]) -> list[str]:
    """Filter rooms to those in the section's allowed buildings, keeping order."""
    allowed = set(get_allowed_buildings(section.dept, section.subject_id))
    return [room for room in all_rooms if get_building_from_room(room) in allowed]


def get_available_rooms(
    section: ExamSection,
    day: int,
    slot: int,
    all_rooms: list[str],
    ledger: SchedulingLedger,
    needs_double_slot: bool = False,
    slots_per_day: int = len(TIME_SLOTS),
) -> list[str]:
    """Get eligible rooms free at (day, slot).

    When needs_double_slot is set and the day has a following slot, rooms
    booked in that following slot are excluded too.

    Args:
        section: Section whose department/subject decides eligibility
        day: Day index
        slot: Slot index
        all_rooms: Room pool in caller order
        ledger: Current scheduling ledger (read only)
        needs_double_slot: Whether the next slot must also be free
        slots_per_day: Number of slots in a day

    Returns:
        Available rooms in their original relative order (may be empty)
    """
    occupied = set(ledger.occupied_rooms(day, slot))
    if needs_double_slot and slot + 1 < slots_per_day:
        occupied |= ledger.occupied_rooms(day, slot + 1)

    return [room for room in get_eligible_rooms(section, all_rooms) if room not in occupied]
