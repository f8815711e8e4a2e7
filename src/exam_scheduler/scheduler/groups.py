"""Atomic placement of subject groups, batches and single sections."""

from collections.abc import Iterable
from dataclasses import dataclass

from .classifier import classify, is_double_unit
from .conflicts import ConflictMatrix, has_conflict
from .grid import TimeGrid
from .ledger import SchedulingLedger
from .models import ExamSection, ScheduledExam, UnscheduledReason
from .rooms import get_available_rooms, is_room_eligible


@dataclass
class PlacementContext:
    """Everything a placement attempt reads or mutates during one run."""

    rooms: list[str]
    ledger: SchedulingLedger
    matrix: ConflictMatrix
    grid: TimeGrid


def group_by_subject(sections: Iterable[ExamSection]) -> dict[str, list[ExamSection]]:
    """Group sections by normalized subject identifier, in first-encounter order."""
    groups: dict[str, list[ExamSection]] = {}
    for section in sections:
        groups.setdefault(section.subject_key, []).append(section)
    return groups


def needs_double_slot(sections: list[ExamSection]) -> bool:
    """A group needs two consecutive slots if any member is double-unit."""
    return any(is_double_unit(section.lec) for section in sections)


def _candidate_rooms(
    sections: list[ExamSection],
    day: int,
    slot: int,
    context: PlacementContext,
    double: bool,
) -> list[str]:
    """Free rooms for the group, chosen by its first member's department/subject.

    Members from other departments narrow the list to buildings that are
    allowed for them as well.
    """
    lead = sections[0]
    rooms = get_available_rooms(
        lead,
        day,
        slot,
        context.rooms,
        context.ledger,
        needs_double_slot=double,
        slots_per_day=context.grid.slots_per_day,
    )
    others = {(s.dept, s.subject_id) for s in sections[1:]} - {(lead.dept, lead.subject_id)}
    if others:
        rooms = [room for room in rooms if all(is_room_eligible(room, dept, subj) for dept, subj in others)]
    return rooms


def place_group(
    sections: list[ExamSection],
    day: int,
    slot: int,
    context: PlacementContext,
    phase: str = "",
) -> list[ScheduledExam] | None:
    """Place every section of a group at one (day, slot), each in its own room.

    All-or-nothing: the ledger is only touched once every member is known
    to fit. Double-unit members also take the same room in the next slot
    and produce a second entry; the subject placement is recorded from the
    first slot only.

    Args:
        sections: Sections sharing one subject (or a single section)
        day: Day index
        slot: Slot index
        context: Rooms, ledger, conflict matrix and grid of the run
        phase: Phase name stored on the created entries

    Returns:
        Created entries (empty for an empty group), or None if the group
        cannot be placed here
    """
    if not sections:
        return []

    grid = context.grid
    if not grid.contains(day, slot):
        return None

    for section in sections:
        if has_conflict(section, day, slot, context.ledger, context.matrix):
            return None

    double = needs_double_slot(sections)
    if double and not grid.has_next_slot(slot):
        return None

    rooms = _candidate_rooms(sections, day, slot, context, double)
    if len(rooms) < len(sections):
        return None

    entries: list[ScheduledExam] = []
    for section, room in zip(sections, rooms):
        priority = classify(section).weight
        occupied_slots = [slot, slot + 1] if is_double_unit(section.lec) else [slot]
        for occupied in occupied_slots:
            context.ledger.occupy(room, day, occupied)
            entries.append(
                ScheduledExam(
                    section=section,
                    day_index=day,
                    slot_index=occupied,
                    room=room,
                    priority=priority,
                    units=section.lec,
                    phase=phase,
                )
            )
        context.ledger.record_subject(section.subject_key, day, slot)

    return entries


def place_group_in_cells(
    sections: list[ExamSection],
    cells: Iterable[tuple[int, int]],
    context: PlacementContext,
    phase: str = "",
) -> list[ScheduledExam] | None:
    """Try a group at each (day, slot) in order; the first success wins."""
    for day, slot in cells:
        entries = place_group(sections, day, slot, context, phase)
        if entries is not None:
            return entries
    return None


def place_group_anywhere(
    sections: list[ExamSection],
    context: PlacementContext,
    phase: str = "",
) -> list[ScheduledExam] | None:
    """Scan the full grid (day-major, slot-minor) for a group placement."""
    return place_group_in_cells(sections, context.grid.cells(), context, phase)


def split_batches(sections: list[ExamSection], batch_size: int) -> list[list[ExamSection]]:
    """Split sections into consecutive batches of at most batch_size."""
    return [sections[i : i + batch_size] for i in range(0, len(sections), batch_size)]


def place_in_batches(
    sections: list[ExamSection],
    batch_size: int,
    context: PlacementContext,
    phase: str = "",
) -> tuple[list[ScheduledExam], list[ExamSection]]:
    """Place a subject group, splitting it into batches when oversized.

    Groups up to batch_size are placed as a whole. Larger groups are split
    and each batch is scanned across the full grid independently.

    Returns:
        Tuple of (entries created, sections whose batch could not be placed)
    """
    if len(sections) <= batch_size:
        entries = place_group_anywhere(sections, context, phase)
        if entries is None:
            return [], list(sections)
        return entries, []

    placed: list[ScheduledExam] = []
    failed: list[ExamSection] = []
    for batch in split_batches(sections, batch_size):
        entries = place_group_anywhere(batch, context, phase)
        if entries is None:
            failed.extend(batch)
        else:
            placed.extend(entries)
    return placed, failed


def diagnose_section(
    section: ExamSection,
    context: PlacementContext,
) -> tuple[UnscheduledReason, str]:
    """Explain why a section fits nowhere in the grid, given the current ledger.

    Returns:
        Tuple of (most frequent reason, summary details)
    """
    double = is_double_unit(section.lec)
    conflicts = 0
    no_room = 0
    no_next_slot = 0

    for day, slot in context.grid.cells():
        if double and not context.grid.has_next_slot(slot):
            no_next_slot += 1
        elif has_conflict(section, day, slot, context.ledger, context.matrix):
            conflicts += 1
        elif not _candidate_rooms([section], day, slot, context, double):
            no_room += 1

    counts = [
        (no_room, UnscheduledReason.NO_ROOM_AVAILABLE),
        (conflicts, UnscheduledReason.COHORT_CONFLICT),
        (no_next_slot, UnscheduledReason.NO_CONSECUTIVE_SLOTS),
    ]
    reason = max(counts, key=lambda item: item[0])[1]

    summary_parts = []
    if no_room:
        summary_parts.append(f"room unavailable: {no_room}")
    if conflicts:
        summary_parts.append(f"cohort conflicts: {conflicts}")
    if no_next_slot:
        summary_parts.append(f"no consecutive slot: {no_next_slot}")

    details = f"Tried {context.grid.size} positions. " + ", ".join(summary_parts)
    return reason, details.strip()
