"""Exam Scheduler - university exam timetabling.

This module assigns every exam section of a term to a (day, time slot, room)
triple. It keeps rooms from being double-booked and keeps subjects of the
same course-year cohort out of the same slot. It also respects department
building rules, pinned general education blocks and double-length six-unit
exams.

Example usage:
    from exam_scheduler import ExamScheduler, load_exam_sections, load_rooms

    sections = load_exam_sections("exams.csv")
    rooms = load_rooms("rooms.txt")

    result = ExamScheduler().schedule(sections, rooms, num_days=5)
    print(f"Coverage: {result.statistics.coverage:.2f}%")

    for entry in result.scheduled:
        print(f"{entry.day} {entry.slot} | {entry.room} | {entry.code}")

    # Export to JSON
    from exam_scheduler.exporters import JSONExporter
    JSONExporter().export(result, "schedule.json")
"""

from .exceptions import (
    DuplicateSectionError,
    ExamSchedulerError,
    InvalidConfigError,
    InvalidDayCountError,
    InvalidInputError,
    InvalidRoomListError,
    MissingColumnError,
    RoomAlreadyBookedError,
    UnsupportedFormatError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .loaders import load_exam_sections, load_rooms, load_schedule_entries
from .scheduler import (
    ExamScheduler,
    ExamSection,
    ScheduledExam,
    ScheduleEvent,
    ScheduleResult,
    SchedulerConfig,
    generate_exam_schedule,
    load_config,
)
from .validators import validate_schedule

__version__ = "0.1.0"

__all__ = [
    # Main scheduler
    "ExamScheduler",
    "generate_exam_schedule",
    "SchedulerConfig",
    "load_config",
    # Models
    "ExamSection",
    "ScheduledExam",
    "ScheduleEvent",
    "ScheduleResult",
    # Loading and export
    "load_exam_sections",
    "load_rooms",
    "load_schedule_entries",
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    "validate_schedule",
    # Exceptions
    "ExamSchedulerError",
    "InvalidInputError",
    "MissingColumnError",
    "UnsupportedFormatError",
    "DuplicateSectionError",
    "InvalidRoomListError",
    "InvalidDayCountError",
    "InvalidConfigError",
    "RoomAlreadyBookedError",
]
