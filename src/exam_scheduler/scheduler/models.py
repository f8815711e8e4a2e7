"""Data models for the exam scheduling engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .constants import get_day_label, get_slot_label, parse_day_label, parse_slot_label


class PriorityTier(str, Enum):
    """Scheduling priority tier of an exam section."""

    GEN_ED = "gen_ed"
    MATH = "math"
    ARCH = "arch"
    MAJOR = "major"

    @property
    def weight(self) -> int:
        """Numeric weight stored on scheduled entries."""
        return TIER_WEIGHTS[self]


# Strictly descending: general education > mathematics > architecture > major
TIER_WEIGHTS = {
    PriorityTier.GEN_ED: 100,
    PriorityTier.MATH: 80,
    PriorityTier.ARCH: 60,
    PriorityTier.MAJOR: 40,
}


class PhaseName(str, Enum):
    """Scheduling phase strategies, in the order the default run uses them."""

    GEN_ED = "gen_ed"
    PRIORITY = "priority"
    MAJOR = "major"
    INDIVIDUAL = "individual"


class UnscheduledReason(str, Enum):
    """Reasons why an exam section could not be scheduled."""

    NO_ROOM_AVAILABLE = "no_room_available"
    COHORT_CONFLICT = "cohort_conflict"
    NO_CONSECUTIVE_SLOTS = "no_consecutive_slots"
    NOT_ATTEMPTED = "not_attempted"


class EventKind(str, Enum):
    """Kinds of scheduling progress events."""

    PHASE_START = "phase_start"
    GROUP_SCHEDULED = "group_scheduled"
    GROUP_DEFERRED = "group_deferred"
    PHASE_END = "phase_end"
    RUN_COMPLETE = "run_complete"


# Keys accepted by ExamSection.from_dict, snake_case first, then the
# upper-case column names used by the registrar export.
_SECTION_ALIASES: dict[str, tuple[str, ...]] = {
    "code": ("code", "CODE"),
    "subject_id": ("subject_id", "SUBJECT_ID"),
    "title": ("title", "descriptive_title", "DESCRIPTIVE_TITLE"),
    "course": ("course", "COURSE"),
    "year_level": ("year_level", "YEAR_LEVEL"),
    "instructor": ("instructor", "INSTRUCTOR"),
    "dept": ("dept", "DEPT"),
    "lec": ("lec", "LEC", "units", "UNITS"),
    "student_count": ("student_count", "STUDENT_COUNT"),
    "is_regular": ("is_regular", "IS_REGULAR"),
    "lecture_room": ("lecture_room", "LECTURE_ROOM"),
}


def _pick(data: dict[str, Any], field_name: str, default: Any = None) -> Any:
    for key in _SECTION_ALIASES[field_name]:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _clean_text(value: Any) -> str:
    """Convert a scalar to stripped text; integral floats lose their '.0'."""
    if value is None:
        return ""
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            value = int(value)
    return str(value).strip()


def _to_int(value: Any) -> int:
    text = _clean_text(value)
    if not text:
        return 0
    return int(float(text))


def _to_bool(value: Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    text = _clean_text(value).lower()
    if not text:
        return default
    return text in ("true", "yes", "y", "1", "regular")


@dataclass(frozen=True, eq=False)
class ExamSection:
    """A single exam section (offering) to be scheduled.

    Identity is the section code.
    """

    code: str
    subject_id: str
    title: str = ""
    course: str = ""
    year_level: str = ""
    instructor: str = ""
    dept: str = ""
    lec: int = 0
    student_count: int = 0
    is_regular: bool = True
    lecture_room: str | None = None

    def __hash__(self) -> int:
        return hash(self.code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExamSection):
            return False
        return self.code == other.code

    @property
    def subject_key(self) -> str:
        """Normalized subject identifier used for grouping and conflicts."""
        return self.subject_id.upper().strip()

    @property
    def course_year_key(self) -> str | None:
        """Cohort key ('BSIT-1'), or None if course or year level is missing."""
        if not self.course or not self.year_level:
            return None
        return f"{self.course.strip()}-{self.year_level}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExamSection":
        """Create an ExamSection from a dictionary.

        Accepts snake_case keys as well as the upper-case keys of the
        registrar export (CODE, SUBJECT_ID, DESCRIPTIVE_TITLE, ...).
        """
        lecture_room = _clean_text(_pick(data, "lecture_room"))
        return cls(
            code=_clean_text(_pick(data, "code", "")),
            subject_id=_clean_text(_pick(data, "subject_id", "")),
            title=_clean_text(_pick(data, "title", "")),
            course=_clean_text(_pick(data, "course", "")),
            year_level=_clean_text(_pick(data, "year_level", "")),
            instructor=_clean_text(_pick(data, "instructor", "")),
            dept=_clean_text(_pick(data, "dept", "")),
            lec=_to_int(_pick(data, "lec", 0)),
            student_count=_to_int(_pick(data, "student_count", 0)),
            is_regular=_to_bool(_pick(data, "is_regular")),
            lecture_room=lecture_room or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert section to dictionary."""
        return {
            "code": self.code,
            "subject_id": self.subject_id,
            "title": self.title,
            "course": self.course,
            "year_level": self.year_level,
            "instructor": self.instructor,
            "dept": self.dept,
            "lec": self.lec,
            "student_count": self.student_count,
            "is_regular": self.is_regular,
            "lecture_room": self.lecture_room,
        }


@dataclass(frozen=True)
class PinnedBlock:
    """A (day, slot) reserved preferentially for a general education category."""

    day: int
    slot: int
    capacity: int


@dataclass(frozen=True)
class GenEdCategory:
    """A general education category and its pinned time blocks."""

    name: str
    prefixes: tuple[str, ...]
    blocks: tuple[PinnedBlock, ...] = ()

    def matches(self, subject_id: str) -> bool:
        """Check if a subject identifier belongs to this category."""
        upper = subject_id.upper().strip()
        return any(upper.startswith(prefix) for prefix in self.prefixes)


@dataclass
class ScheduledExam:
    """An exam section placed at a (day, slot, room).

    Double-unit sections produce two entries, one per occupied slot.
    """

    section: ExamSection
    day_index: int
    slot_index: int
    room: str
    priority: int
    units: int
    phase: str = ""

    @property
    def day(self) -> str:
        """Day label, e.g. 'Day 1'."""
        return get_day_label(self.day_index)

    @property
    def slot(self) -> str:
        """Slot label, e.g. '7:30-9:00'."""
        return get_slot_label(self.slot_index)

    @property
    def code(self) -> str:
        return self.section.code

    @property
    def subject_id(self) -> str:
        return self.section.subject_id

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dictionary."""
        data = self.section.to_dict()
        data.update(
            {
                "day": self.day,
                "slot": self.slot,
                "day_index": self.day_index,
                "slot_index": self.slot_index,
                "room": self.room,
                "priority": self.priority,
                "units": self.units,
                "phase": self.phase,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledExam":
        """Create a ScheduledExam from a dictionary produced by to_dict().

        Day and slot are read from the indices when present, otherwise
        parsed from the 'day'/'slot' labels (also 'DAY'/'SLOT').
        """
        if "day_index" in data:
            day_index = int(data["day_index"])
        else:
            day_index = parse_day_label(str(data.get("day", data.get("DAY", ""))))
        if "slot_index" in data:
            slot_index = int(data["slot_index"])
        else:
            slot_index = parse_slot_label(str(data.get("slot", data.get("SLOT", ""))))

        section = ExamSection.from_dict(data)
        return cls(
            section=section,
            day_index=day_index,
            slot_index=slot_index,
            room=_clean_text(data.get("room", data.get("ROOM", ""))),
            priority=_to_int(data.get("priority", data.get("PRIORITY", 0))),
            units=_to_int(data.get("units", section.lec)),
            phase=_clean_text(data.get("phase", "")),
        )


@dataclass
class UnscheduledExam:
    """An exam section that could not be scheduled."""

    section: ExamSection
    reason: UnscheduledReason
    details: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = self.section.to_dict()
        data.update({"reason": self.reason.value, "details": self.details})
        return data


@dataclass
class PhaseReport:
    """Outcome of a single scheduling phase."""

    phase: str
    offered: int = 0
    scheduled: int = 0
    deferred: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "offered": self.offered,
            "scheduled": self.scheduled,
            "deferred": self.deferred,
        }


@dataclass
class ScheduleEvent:
    """Progress event emitted by the scheduler.

    Events are a reporting side channel only; they never affect placement.
    """

    kind: EventKind
    phase: str = ""
    label: str = ""
    category: str = ""
    scheduled: int = 0
    deferred: int = 0
    coverage: float | None = None
    unscheduled_codes: list[str] = field(default_factory=list)


@dataclass
class ScheduleStatistics:
    """Statistics about the generated exam schedule."""

    total_sections: int = 0
    excluded: int = 0
    eligible: int = 0
    scheduled_sections: int = 0
    scheduled_entries: int = 0
    unscheduled: int = 0
    by_day: dict[str, int] = field(default_factory=dict)
    by_building: dict[str, int] = field(default_factory=dict)

    @property
    def coverage(self) -> float:
        """Percentage of eligible sections that were scheduled."""
        if self.eligible == 0:
            return 0.0
        return 100.0 * self.scheduled_sections / self.eligible

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_sections": self.total_sections,
            "excluded": self.excluded,
            "eligible": self.eligible,
            "scheduled_sections": self.scheduled_sections,
            "scheduled_entries": self.scheduled_entries,
            "unscheduled": self.unscheduled,
            "coverage": round(self.coverage, 2),
            "by_day": self.by_day,
            "by_building": self.by_building,
        }


@dataclass
class ScheduleResult:
    """Result of an exam scheduling run."""

    scheduled: list[ScheduledExam] = field(default_factory=list)
    unscheduled: list[UnscheduledExam] = field(default_factory=list)
    excluded: list[ExamSection] = field(default_factory=list)
    phase_reports: list[PhaseReport] = field(default_factory=list)
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    num_days: int = 0
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total_entries(self) -> int:
        """Total number of scheduled entries (double-unit sections count twice)."""
        return len(self.scheduled)

    @property
    def total_unscheduled(self) -> int:
        return len(self.unscheduled)

    @property
    def unscheduled_codes(self) -> list[str]:
        return [u.section.code for u in self.unscheduled]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "num_days": self.num_days,
            "scheduled": [s.to_dict() for s in self.scheduled],
            "unscheduled": [u.to_dict() for u in self.unscheduled],
            "unscheduled_codes": self.unscheduled_codes,
            "excluded_codes": [s.code for s in self.excluded],
            "phases": [p.to_dict() for p in self.phase_reports],
            "statistics": self.statistics.to_dict(),
        }
