"""Test fixtures for exam scheduler tests."""

import pytest

from exam_scheduler.scheduler.conflicts import build_conflict_matrix
from exam_scheduler.scheduler.grid import TimeGrid
from exam_scheduler.scheduler.groups import PlacementContext
from exam_scheduler.scheduler.ledger import SchedulingLedger
from exam_scheduler.scheduler.models import ExamSection


@pytest.fixture
def make_section():
    """Factory for exam sections with sensible defaults."""

    def _make(
        code: str,
        subject_id: str,
        course: str = "BSIT",
        year_level: str = "1",
        dept: str = "",
        lec: int = 3,
        student_count: int = 30,
        instructor: str = "Instructor",
    ) -> ExamSection:
        return ExamSection(
            code=code,
            subject_id=subject_id,
            title=f"{subject_id} exam",
            course=course,
            year_level=year_level,
            instructor=instructor,
            dept=dept,
            lec=lec,
            student_count=student_count,
        )

    return _make


@pytest.fixture
def make_context():
    """Factory for placement contexts over a fresh ledger."""

    def _make(sections: list[ExamSection], rooms: list[str], num_days: int = 1) -> PlacementContext:
        return PlacementContext(
            rooms=rooms,
            ledger=SchedulingLedger(),
            matrix=build_conflict_matrix(sections),
            grid=TimeGrid(num_days),
        )

    return _make


@pytest.fixture
def campus_rooms():
    """Five rooms in every building."""
    return [f"{building}-{number}" for building in "ANKLMJBC" for number in range(101, 106)]


@pytest.fixture
def sample_term(make_section):
    """A small term with every priority tier and a double-unit subject."""
    return [
        make_section("E1", "ETHC101", course="BSIT", dept="SHAS"),
        make_section("E2", "ETHC101", course="BSCE", dept="SHAS"),
        make_section("G1", "ENGL101", course="BSIT", dept="SHAS"),
        make_section("G2", "ENGL101", course="BSCE", dept="SHAS"),
        make_section("P1", "PHED101", course="BSIT", dept="SHAS"),
        make_section("R1", "RESM201", course="BSIT", year_level="2", dept="SHAS"),
        make_section("M1", "MATH101", course="BSIT", dept="SACE"),
        make_section("M2", "MATH101", course="BSCE", dept="SACE"),
        make_section("M3", "MATH201", course="BSCE", year_level="2", dept="SACE", lec=6),
        make_section("A1", "ARCH101", course="BSARCH", dept="SACE"),
        make_section("A2", "ARCH102", course="BSARCH", dept="SACE"),
        make_section("C1", "CS101", course="BSIT", dept="SCS"),
        make_section("C2", "CS101", course="BSIT", dept="SCS"),
        make_section("C3", "CS102", course="BSIT", dept="SCS"),
        make_section("C4", "CS201", course="BSIT", year_level="2", dept="SCS", lec=6),
        make_section("B1", "ACCT101", course="BSA", dept="SECAP"),
        make_section("N1", "NURS101", course="BSN", dept="NURS"),
        make_section("S1", "NSTP1", course="BSIT", dept="SAS"),
    ]
