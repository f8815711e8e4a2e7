"""Validation of generated exam schedules."""

from collections import defaultdict
from itertools import combinations

from .scheduler.classifier import is_double_unit
from .scheduler.conflicts import ConflictMatrix, build_conflict_matrix
from .scheduler.models import ExamSection, ScheduledExam
from .scheduler.rooms import get_allowed_buildings, get_building_from_room


def check_double_booking(entries: list[ScheduledExam]) -> list[str]:
    """Find rooms used by more than one entry at the same (day, slot)."""
    errors = []
    seen: dict[tuple[int, int, str], str] = {}
    for entry in entries:
        key = (entry.day_index, entry.slot_index, entry.room)
        if key in seen and seen[key] != entry.code:
            errors.append(
                f"Room {entry.room} double-booked on {entry.day} {entry.slot}: "
                f"{seen[key]} and {entry.code}"
            )
        seen.setdefault(key, entry.code)
    return errors


def _entries_by_code(entries: list[ScheduledExam]) -> dict[str, list[ScheduledExam]]:
    by_code: dict[str, list[ScheduledExam]] = defaultdict(list)
    for entry in entries:
        by_code[entry.code].append(entry)
    return by_code


def check_slot_contiguity(entries: list[ScheduledExam]) -> list[str]:
    """Check entry counts per section and double-unit slot pairing.

    Double-unit sections need exactly two entries on the same day, in the
    same room, in consecutive slots. Other sections need exactly one entry.
    """
    errors = []
    for code, items in _entries_by_code(entries).items():
        if not is_double_unit(items[0].units):
            if len(items) != 1:
                errors.append(f"Section {code} has {len(items)} entries, expected 1")
            continue

        if len(items) != 2:
            errors.append(f"Double-unit section {code} has {len(items)} entries, expected 2")
            continue

        first, second = sorted(items, key=lambda e: (e.day_index, e.slot_index))
        if first.day_index != second.day_index:
            errors.append(f"Double-unit section {code} spans {first.day} and {second.day}")
        elif second.slot_index != first.slot_index + 1:
            errors.append(f"Double-unit section {code} slots are not consecutive: {first.slot}, {second.slot}")
        if first.room != second.room:
            errors.append(f"Double-unit section {code} changes room: {first.room} -> {second.room}")
    return errors


def check_building_eligibility(entries: list[ScheduledExam]) -> list[str]:
    """Check every entry's room is in a building allowed for its department/subject."""
    errors = []
    for entry in entries:
        allowed = get_allowed_buildings(entry.section.dept, entry.subject_id)
        building = get_building_from_room(entry.room)
        if building not in allowed:
            errors.append(
                f"Section {entry.code} ({entry.subject_id}, {entry.section.dept or 'no dept'}) "
                f"in room {entry.room}; allowed buildings: {', '.join(allowed)}"
            )
    return errors


def check_cohort_conflicts(
    entries: list[ScheduledExam],
    matrix: ConflictMatrix | None = None,
) -> list[str]:
    """Find conflicting subjects of one course-year placed at the same (day, slot).

    A section's placement is its first slot; the second slot of a
    double-unit section is not conflict-checked.

    Args:
        entries: Scheduled entries
        matrix: Conflict matrix of the run; built from the entries' sections if None
    """
    by_code = _entries_by_code(entries)
    if matrix is None:
        matrix = build_conflict_matrix([items[0].section for items in by_code.values()])

    placements: dict[tuple[str, int, int], set[str]] = defaultdict(set)
    for items in by_code.values():
        first = min(items, key=lambda e: (e.day_index, e.slot_index))
        key = first.section.course_year_key
        if key is None:
            continue
        placements[(key, first.day_index, first.slot_index)].add(first.section.subject_key)

    errors = []
    for (course_year, day, slot), subjects in placements.items():
        conflicts = matrix.get(course_year, {})
        for first_subject, second_subject in combinations(sorted(subjects), 2):
            if second_subject in conflicts.get(first_subject, set()):
                errors.append(
                    f"Cohort {course_year} has {first_subject} and {second_subject} "
                    f"at the same time (day {day + 1}, slot {slot + 1})"
                )
    return errors


def check_known_sections(entries: list[ScheduledExam], sections: list[ExamSection]) -> list[str]:
    """Check that scheduled entries only refer to known sections."""
    known = {s.code for s in sections}
    return [f"Entry for unknown section {code}" for code in _entries_by_code(entries) if code not in known]


def validate_schedule(
    entries: list[ScheduledExam],
    matrix: ConflictMatrix | None = None,
    sections: list[ExamSection] | None = None,
) -> list[str]:
    """Run every schedule check.

    Args:
        entries: Scheduled entries to validate
        matrix: Conflict matrix of the run (rebuilt from entries if None)
        sections: Input sections; enables the unknown-section check

    Returns:
        List of violation messages (empty if the schedule is valid)
    """
    errors: list[str] = []
    errors.extend(check_double_booking(entries))
    errors.extend(check_cohort_conflicts(entries, matrix))
    errors.extend(check_slot_contiguity(entries))
    errors.extend(check_building_eligibility(entries))
    if sections is not None:
        errors.extend(check_known_sections(entries, sections))
    return errors


def is_valid_schedule(entries: list[ScheduledExam]) -> tuple[bool, list[str]]:
    """Validate a schedule.

    Returns:
        Tuple of (is_valid, violation messages)
    """
    errors = validate_schedule(entries)
    return not errors, errors
