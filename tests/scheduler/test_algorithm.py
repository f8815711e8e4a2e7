"""Tests for the multi-phase exam scheduler."""

import pytest

from exam_scheduler.exceptions import InvalidDayCountError, InvalidRoomListError
from exam_scheduler.scheduler.algorithm import ExamScheduler, generate_exam_schedule
from exam_scheduler.scheduler.config import SchedulerConfig
from exam_scheduler.scheduler.conflicts import build_conflict_matrix
from exam_scheduler.scheduler.models import EventKind, UnscheduledReason
from exam_scheduler.validators import (
    check_building_eligibility,
    check_cohort_conflicts,
    check_double_booking,
    check_slot_contiguity,
    validate_schedule,
)


def _placement(result, code):
    entries = [e for e in result.scheduled if e.code == code]
    return [(e.day_index, e.slot_index, e.room) for e in entries]


class TestScenarios:
    """End-to-end scenarios on small inputs."""

    def test_single_gen_ed_section_at_first_block(self, make_section):
        exam = make_section("E1", "ETHC101")

        result = ExamScheduler().schedule([exam], ["A-101"], 5)

        assert len(result.scheduled) == 1
        entry = result.scheduled[0]
        assert (entry.day_index, entry.slot_index, entry.room) == (0, 0, "A-101")
        assert entry.day == "Day 1"
        assert entry.slot == "7:30-9:00"
        assert entry.phase == "gen_ed"
        assert result.unscheduled == []

    def test_double_unit_math_group(self, make_section):
        exams = [
            make_section("M1", "MATH201", dept="SACE", lec=6),
            make_section("M2", "MATH201", dept="SACE", lec=6),
        ]

        result = ExamScheduler().schedule(exams, ["N-101", "N-102"], 5)

        assert len(result.scheduled) == 4
        rooms = set()
        for code in ("M1", "M2"):
            (day_a, slot_a, room_a), (day_b, slot_b, room_b) = _placement(result, code)
            assert day_a == day_b
            assert slot_b == slot_a + 1
            assert room_a == room_b
            rooms.add(room_a)
        assert rooms == {"N-101", "N-102"}
        assert all(e.phase == "priority" for e in result.scheduled)
        assert result.statistics.scheduled_sections == 2
        assert result.statistics.scheduled_entries == 4

    def test_cohort_conflict_moves_second_subject(self, make_section):
        exams = [make_section("C1", "CS101"), make_section("C2", "CS102")]

        result = ExamScheduler().schedule(exams, ["N-101", "N-102"], 5)

        assert _placement(result, "C1") == [(0, 0, "N-101")]
        assert _placement(result, "C2") == [(0, 1, "N-101")]

    def test_no_eligible_building(self, make_section):
        exam = make_section("E1", "CE101", dept="SACE")

        result = ExamScheduler().schedule([exam], ["A-101", "A-102"], 5)

        assert result.scheduled == []
        assert result.unscheduled_codes == ["E1"]
        assert result.unscheduled[0].reason == UnscheduledReason.NO_ROOM_AVAILABLE

    def test_building_full(self, make_section):
        exams = [make_section(f"E{i}", f"ENGR{i}", course="", dept="SACE") for i in range(9)]

        result = ExamScheduler().schedule(exams, ["N-101", "A-101"], 1)

        assert len(result.scheduled) == 8
        assert result.unscheduled_codes == ["E8"]
        assert all(e.room == "N-101" for e in result.scheduled)


class TestPhases:
    """Tests for phase behaviour within a run."""

    def test_gen_ed_group_falls_back_to_individual(self, make_section):
        exams = [make_section("E1", "ETHC101"), make_section("E2", "ETHC101", course="BSCE")]

        result = ExamScheduler().schedule(exams, ["A-101"], 2)

        assert [(r.phase, r.scheduled, r.deferred) for r in result.phase_reports] == [
            ("gen_ed", 0, 2),
            ("priority", 0, 0),
            ("major", 0, 0),
            ("individual", 2, 0),
        ]
        assert _placement(result, "E1") == [(0, 0, "A-101")]
        assert _placement(result, "E2") == [(0, 1, "A-101")]

    def test_second_block_used_when_first_is_taken(self, make_section):
        exams = [
            make_section("E1", "ETHC101", course="BSIT"),
            make_section("E2", "ETHC102", course="BSIT"),
        ]

        result = ExamScheduler().schedule(exams, ["A-101", "A-102"], 2)

        assert _placement(result, "E1") == [(0, 0, "A-101")]
        assert _placement(result, "E2") == [(1, 0, "A-101")]

    def test_research_scans_full_grid(self, make_section):
        exams = [make_section("E1", "ETHC101"), make_section("R1", "RESM101", course="BSCE")]

        result = ExamScheduler().schedule(exams, ["A-101"], 2)

        assert _placement(result, "R1") == [(0, 1, "A-101")]
        assert result.scheduled[-1].phase == "gen_ed"

    def test_block_outside_grid_defers(self, make_section):
        exam = make_section("L1", "LITR101")

        result = ExamScheduler().schedule([exam], ["A-101"], 2)

        assert result.scheduled[0].phase == "individual"
        assert _placement(result, "L1") == [(0, 0, "A-101")]

    def test_math_before_arch_before_major(self, make_section):
        exams = [
            make_section("C1", "CS101", course=""),
            make_section("A1", "ARCH101", course=""),
            make_section("M1", "MATH101", course="", dept="SACE"),
        ]

        result = ExamScheduler().schedule(exams, ["C-101"], 1)

        assert _placement(result, "M1") == [(0, 0, "C-101")]
        assert _placement(result, "A1") == [(0, 1, "C-101")]
        assert _placement(result, "C1") == [(0, 2, "C-101")]
        assert [e.priority for e in result.scheduled] == [80, 60, 40]

    def test_major_groups_smallest_first(self, make_section):
        exams = [
            make_section("B1", "BIG101", course=""),
            make_section("B2", "BIG101", course=""),
            make_section("B3", "BIG101", course=""),
            make_section("S1", "SMALL101", course=""),
        ]

        result = ExamScheduler().schedule(exams, ["A-1", "A-2", "A-3"], 1)

        assert _placement(result, "S1") == [(0, 0, "A-1")]
        assert {slot for _, slot, _ in _placement(result, "B1")} == {1}
        assert [room for _, _, room in sum((_placement(result, c) for c in ("B1", "B2", "B3")), [])] == [
            "A-1",
            "A-2",
            "A-3",
        ]

    def test_oversized_group_batched(self, make_section):
        exams = [make_section(f"B{i}", "BIG101", course="") for i in range(3)]

        result = ExamScheduler(SchedulerConfig(batch_size=2)).schedule(exams, ["A-1", "A-2"], 1)

        assert [e.slot_index for e in result.scheduled] == [0, 0, 1]
        assert all(e.phase == "major" for e in result.scheduled)

    def test_phases_without_individual(self, make_section):
        exams = [make_section("E1", "ETHC101"), make_section("E2", "ETHC101", course="BSCE")]
        config = SchedulerConfig(phases="gen_ed,priority,major")

        result = ExamScheduler(config).schedule(exams, ["A-101"], 2)

        assert result.scheduled == []
        assert sorted(result.unscheduled_codes) == ["E1", "E2"]

    def test_not_attempted_when_no_phase_claims(self, make_section):
        exams = [make_section("C1", "CS101")]
        config = SchedulerConfig(phases=["gen_ed"])

        result = ExamScheduler(config).schedule(exams, ["A-101"], 2)

        assert result.unscheduled[0].reason == UnscheduledReason.NOT_ATTEMPTED

    def test_size_first_preset(self, make_section):
        exams = [make_section("E1", "ETHC101"), make_section("C1", "CS101", course="BSCE")]
        config = SchedulerConfig(phases="size_first")

        result = ExamScheduler(config).schedule(exams, ["A-101"], 2)

        assert [r.phase for r in result.phase_reports] == ["major", "individual"]
        assert {e.phase for e in result.scheduled} == {"major"}
        assert len(result.scheduled) == 2

    def test_block_capacity_enforced(self, make_section):
        exams = [make_section(f"E{i}", "ETHC101") for i in range(41)]
        rooms = [f"A-{i}" for i in range(1, 51)]

        advisory = ExamScheduler().schedule(exams, rooms, 2)
        enforced = ExamScheduler(SchedulerConfig(enforce_block_capacity=True)).schedule(exams, rooms, 2)

        assert {e.phase for e in advisory.scheduled} == {"gen_ed"}
        assert enforced.phase_reports[0].deferred == 41
        assert len(enforced.scheduled) == 41


class TestLatestPlacement:
    """Conflict checks see only the most recent placement of a subject."""

    def test_split_subject_frees_its_earlier_cell(self, make_section):
        exams = [
            make_section("X1", "X101", course="", dept="SACE"),
            make_section("B0", "BIG101"),
            make_section("B1", "BIG101"),
            make_section("B2", "BIG101", dept="NURS"),
            make_section("B3", "BIG101", dept="SACE"),
            make_section("O0", "OTH101", dept="NURS"),
            make_section("O1", "OTH101", dept="SACE"),
            make_section("O2", "OTH101", dept="NURS"),
            make_section("O3", "OTH101", dept="SACE"),
        ]
        rooms = ["A-1", "A-2", "A-3", "A-4", "N-1"]

        result = ExamScheduler(SchedulerConfig(batch_size=2)).schedule(exams, rooms, 1)

        assert result.unscheduled == []
        assert _placement(result, "B0") == [(0, 0, "A-1")]
        assert _placement(result, "B3") == [(0, 1, "N-1")]
        assert {e.phase for e in result.scheduled if e.code in ("B0", "B1")} == {"major"}
        assert {e.phase for e in result.scheduled if e.code in ("B2", "B3")} == {"individual"}
        # BIG101 was last placed at slot 1, so OTH101 may reuse slot 0
        assert _placement(result, "O0") == [(0, 0, "A-4")]
        assert check_cohort_conflicts(result.scheduled) != []


class TestValidationAndExclusion:
    """Tests for input validation and department exclusion."""

    def test_empty_rooms(self, make_section):
        with pytest.raises(InvalidRoomListError):
            ExamScheduler().schedule([make_section("E1", "ETHC101")], [], 5)

    @pytest.mark.parametrize("num_days", [0, -1])
    def test_invalid_days(self, make_section, num_days):
        with pytest.raises(InvalidDayCountError):
            ExamScheduler().schedule([make_section("E1", "ETHC101")], ["A-101"], num_days)

    def test_repeated_rooms_used_once(self, make_section):
        exams = [make_section("C1", "CS101"), make_section("C2", "CS101")]

        result = ExamScheduler().schedule(exams, ["N-101", "N-101"], 1)

        assert check_double_booking(result.scheduled) == []
        assert _placement(result, "C1") == [(0, 0, "N-101")]
        assert _placement(result, "C2") == [(0, 1, "N-101")]
        assert result.phase_reports[2].deferred == 2

    def test_student_affairs_excluded(self, make_section):
        exams = [
            make_section("S1", "NSTP1", dept="SAS"),
            make_section("S2", "NSTP2", dept="sas"),
            make_section("C1", "CS101"),
        ]

        result = ExamScheduler().schedule(exams, ["A-101"], 1)

        assert [s.code for s in result.excluded] == ["S1", "S2"]
        assert result.unscheduled == []
        assert [e.code for e in result.scheduled] == ["C1"]
        assert result.statistics.total_sections == 3
        assert result.statistics.excluded == 2
        assert result.statistics.eligible == 1
        assert result.statistics.coverage == 100.0

    def test_empty_input(self):
        result = ExamScheduler().schedule([], ["A-101"], 1)

        assert result.scheduled == []
        assert result.statistics.coverage == 0.0

    def test_inputs_not_mutated(self, sample_term, campus_rooms):
        exams = list(sample_term)
        rooms = list(campus_rooms)

        ExamScheduler().schedule(exams, rooms, 5)

        assert exams == sample_term
        assert rooms == campus_rooms

    def test_generate_exam_schedule(self, make_section):
        entries = generate_exam_schedule([make_section("E1", "ETHC101")], ["A-101"], 1)
        assert [e.code for e in entries] == ["E1"]


class TestScheduleProperties:
    """Hard constraints over a realistic term."""

    def test_sample_term_is_valid(self, sample_term, campus_rooms):
        result = ExamScheduler().schedule(sample_term, campus_rooms, 5)
        eligible = [s for s in sample_term if s.dept != "SAS"]

        assert result.unscheduled == []
        assert validate_schedule(result.scheduled, build_conflict_matrix(eligible), eligible) == []
        assert result.statistics.scheduled_entries == 19
        assert result.statistics.coverage == 100.0

    def test_every_section_appears_once(self, sample_term, campus_rooms):
        result = ExamScheduler().schedule(sample_term, campus_rooms, 5)

        placed = {e.code for e in result.scheduled}
        unscheduled = set(result.unscheduled_codes)
        excluded = {s.code for s in result.excluded}

        assert placed.isdisjoint(unscheduled)
        assert placed | unscheduled | excluded == {s.code for s in sample_term}

    def test_scarce_rooms_keep_hard_constraints(self, sample_term):
        rooms = ["A-1", "N-1", "K-1", "C-1", "L-1"]

        result = ExamScheduler().schedule(sample_term, rooms, 1)

        assert check_double_booking(result.scheduled) == []
        assert check_building_eligibility(result.scheduled) == []
        assert check_slot_contiguity(result.scheduled) == []
        assert result.statistics.scheduled_sections + result.statistics.unscheduled == result.statistics.eligible

    def test_individual_phase_only_adds(self, sample_term):
        rooms = ["A-1", "N-1", "K-1", "C-1", "L-1"]
        without = ExamScheduler(SchedulerConfig(phases="gen_ed,priority,major")).schedule(sample_term, rooms, 1)
        full = ExamScheduler().schedule(sample_term, rooms, 1)

        assert full.statistics.scheduled_sections >= without.statistics.scheduled_sections
        prefix = [(e.code, e.day_index, e.slot_index, e.room) for e in without.scheduled]
        assert [(e.code, e.day_index, e.slot_index, e.room) for e in full.scheduled[: len(prefix)]] == prefix

    def test_deterministic(self, sample_term, campus_rooms):
        first = ExamScheduler().schedule(sample_term, campus_rooms, 3)
        second = ExamScheduler().schedule(sample_term, campus_rooms, 3)

        assert [(e.code, e.day_index, e.slot_index, e.room) for e in first.scheduled] == [
            (e.code, e.day_index, e.slot_index, e.room) for e in second.scheduled
        ]


class TestEvents:
    """Tests for the progress event side channel."""

    def test_event_sequence(self, make_section):
        events = []
        scheduler = ExamScheduler(event_sink=events.append)

        scheduler.schedule([make_section("E1", "ETHC101")], ["A-101"], 1)

        kinds = [e.kind for e in events]
        assert kinds[0] == EventKind.PHASE_START
        assert kinds[-1] == EventKind.RUN_COMPLETE
        assert kinds.count(EventKind.PHASE_START) == 4
        assert kinds.count(EventKind.PHASE_END) == 4
        scheduled = [e for e in events if e.kind == EventKind.GROUP_SCHEDULED]
        assert [(e.phase, e.label, e.category, e.scheduled) for e in scheduled] == [
            ("gen_ed", "ETHC101", "ethics", 1)
        ]
        assert events[-1].coverage == 100.0
        assert events[-1].unscheduled_codes == []

    def test_unscheduled_codes_capped(self, make_section):
        events = []
        exams = [make_section(f"E{i}", f"CE{i}", dept="SACE") for i in range(25)]

        result = ExamScheduler(event_sink=events.append).schedule(exams, ["A-101"], 1)

        assert len(result.unscheduled) == 25
        assert events[-1].unscheduled_codes == [f"E{i}" for i in range(20)]
        assert events[-1].coverage == 0.0

    def test_sink_does_not_change_result(self, sample_term, campus_rooms):
        silent = ExamScheduler().schedule(sample_term, campus_rooms, 2)
        observed = ExamScheduler(event_sink=lambda event: None).schedule(sample_term, campus_rooms, 2)

        assert [(e.code, e.slot_index, e.room) for e in silent.scheduled] == [
            (e.code, e.slot_index, e.room) for e in observed.scheduled
        ]
