"""University exam scheduling engine.

This package assigns every exam section of a term to a (day, slot, room)
triple with a greedy multi-phase heuristic: no room is double-booked, no two
subjects of the same course-year cohort share a slot, rooms respect building
eligibility, general education subjects go to their pinned blocks and
six-unit subjects take two consecutive slots in one room.

Main classes:
- ExamScheduler: Phase orchestrator
- SchedulerConfig: Phase order, batch size and exclusions

Usage:
    from exam_scheduler.scheduler import ExamScheduler, ExamSection

    scheduler = ExamScheduler()
    result = scheduler.schedule(sections, rooms=["N-101", "N-102"], num_days=5)
"""

from .algorithm import ExamScheduler, generate_exam_schedule
from .classifier import (
    CATEGORIES,
    classify,
    classify_subject,
    get_gen_ed_category,
    is_arch,
    is_double_unit,
    is_gen_ed,
    is_math,
)
from .config import (
    DEFAULT_PHASE_ORDER,
    SIZE_FIRST_PHASE_ORDER,
    SchedulerConfig,
    load_config,
)
from .conflicts import ConflictMatrix, build_conflict_matrix, has_conflict
from .constants import TIME_SLOTS
from .grid import TimeGrid
from .groups import PlacementContext, group_by_subject, place_group
from .ledger import SchedulingLedger
from .models import (
    EventKind,
    ExamSection,
    PhaseName,
    PhaseReport,
    PriorityTier,
    ScheduledExam,
    ScheduleEvent,
    ScheduleResult,
    ScheduleStatistics,
    UnscheduledExam,
    UnscheduledReason,
)
from .rooms import get_allowed_buildings, get_available_rooms, get_building_from_room

__all__ = [
    # Main scheduler
    "ExamScheduler",
    "generate_exam_schedule",
    # Configuration
    "SchedulerConfig",
    "load_config",
    "DEFAULT_PHASE_ORDER",
    "SIZE_FIRST_PHASE_ORDER",
    # Models
    "EventKind",
    "ExamSection",
    "PhaseName",
    "PhaseReport",
    "PriorityTier",
    "ScheduledExam",
    "ScheduleEvent",
    "ScheduleResult",
    "ScheduleStatistics",
    "UnscheduledExam",
    "UnscheduledReason",
    # Engine components
    "CATEGORIES",
    "ConflictMatrix",
    "PlacementContext",
    "SchedulingLedger",
    "TIME_SLOTS",
    "TimeGrid",
    "build_conflict_matrix",
    "classify",
    "classify_subject",
    "get_allowed_buildings",
    "get_available_rooms",
    "get_building_from_room",
    "get_gen_ed_category",
    "group_by_subject",
    "has_conflict",
    "is_arch",
    "is_double_unit",
    "is_gen_ed",
    "is_math",
    "place_group",
]
