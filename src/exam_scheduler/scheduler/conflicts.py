"""Cohort conflict detection for exam scheduling."""

from .ledger import SchedulingLedger
from .models import ExamSection

# course-year key -> subject -> subjects that must not share its timeslot
ConflictMatrix = dict[str, dict[str, set[str]]]


def group_by_course_year(sections: list[ExamSection]) -> dict[str, list[ExamSection]]:
    """Group sections by course-year key, in first-encounter order.

    Sections missing course or year level are left out.
    """
    groups: dict[str, list[ExamSection]] = {}
    for section in sections:
        key = section.course_year_key
        if key is None:
            continue
        groups.setdefault(key, []).append(section)
    return groups


def build_conflict_matrix(sections: list[ExamSection]) -> ConflictMatrix:
    """Build the cohort conflict matrix.

    Within a course-year group every pair of sections with different codes
    and different subjects marks the two subjects as conflicting. Every
    subject in a group gets an entry, possibly with an empty set.

    Args:
        sections: Eligible exam sections

    Returns:
        Conflict matrix keyed by course-year, then subject
    """
    matrix: ConflictMatrix = {}

    for course_year, group in group_by_course_year(sections).items():
        subjects = matrix.setdefault(course_year, {})
        for first in group:
            conflicts = subjects.setdefault(first.subject_key, set())
            for second in group:
                if first.code != second.code and first.subject_key != second.subject_key:
                    conflicts.add(second.subject_key)

    return matrix


def get_conflicting_subjects(section: ExamSection, matrix: ConflictMatrix) -> set[str]:
    """Get the subjects that must not share a timeslot with a section's subject."""
    key = section.course_year_key
    if key is None:
        return set()
    return matrix.get(key, {}).get(section.subject_key, set())


def has_conflict(
    section: ExamSection,
    day: int,
    slot: int,
    ledger: SchedulingLedger,
    matrix: ConflictMatrix,
) -> bool:
    """Check if placing a section at (day, slot) collides with its cohort.

    A conflict exists when any conflicting subject's current placement in
    the ledger is exactly (day, slot).
    """
    for subject in get_conflicting_subjects(section, matrix):
        if ledger.placement_of(subject) == (day, slot):
            return True
    return False
