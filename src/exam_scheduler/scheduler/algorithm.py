"""Multi-phase exam scheduling algorithm."""

import logging
from collections import Counter
from datetime import datetime

from ..exceptions import InvalidRoomListError
from .config import SchedulerConfig
from .conflicts import build_conflict_matrix
from .grid import TimeGrid
from .groups import PlacementContext, diagnose_section
from .ledger import SchedulingLedger
from .models import (
    EventKind,
    ExamSection,
    PhaseName,
    PhaseReport,
    ScheduledExam,
    ScheduleEvent,
    ScheduleResult,
    ScheduleStatistics,
    UnscheduledExam,
    UnscheduledReason,
)
from .phases import EventSink, create_phase
from .rooms import get_building_from_room

logger = logging.getLogger(__name__)


class ExamScheduler:
    """Greedy multi-phase exam scheduler.

    Default phase sequence:
    1. Exclusion: student affairs sections are dropped before anything else
    2. General education: subject groups at their category's pinned blocks
    3. High priority: mathematics, then architecture, across the full grid
    4. Major subjects: remaining groups smallest first, batched when oversized
    5. Individual retry: every deferred section on its own

    Each run builds a fresh ledger and conflict matrix; nothing is kept
    between runs. Placement is never undone once committed.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            config: Scheduler configuration (defaults if None)
            event_sink: Optional callable receiving every ScheduleEvent
        """
        self.config = config or SchedulerConfig()
        self.event_sink = event_sink

    def schedule(
        self,
        exams: list[ExamSection],
        rooms: list[str],
        num_days: int,
    ) -> ScheduleResult:
        """Generate an exam schedule.

        Args:
            exams: Exam sections to place (read only)
            rooms: Room identifiers like 'N-201', in preference order (read only;
                repeated identifiers are used once)
            num_days: Number of exam days

        Returns:
            ScheduleResult with entries, unscheduled sections and statistics

        Raises:
            InvalidRoomListError: If the room list is empty
            InvalidDayCountError: If num_days is not a positive integer
        """
        if not rooms:
            raise InvalidRoomListError()
        grid = TimeGrid(num_days)

        eligible = [e for e in exams if not self.config.is_excluded(e.dept)]
        excluded = [e for e in exams if self.config.is_excluded(e.dept)]

        logger.info("Starting exam scheduler")
        logger.info(f"  Total exams: {len(exams)}")
        logger.info(f"  Rooms: {len(rooms)}")
        logger.info(f"  Days: {num_days}")
        logger.info(f"  Eligible: {len(eligible)} (filtered {len(excluded)} excluded)")

        matrix = build_conflict_matrix(eligible)
        logger.info(f"Built conflict matrix for {len(matrix)} course-year groups")

        context = PlacementContext(
            rooms=list(dict.fromkeys(rooms)),
            ledger=SchedulingLedger(),
            matrix=matrix,
            grid=grid,
        )

        scheduled: list[ScheduledExam] = []
        phase_reports: list[PhaseReport] = []
        pending = list(eligible)
        deferred: list[ExamSection] = []
        scheduled_sections = 0

        for phase_name in self.config.phases:
            phase = create_phase(phase_name, self.config, self._emit)

            if phase_name == PhaseName.INDIVIDUAL:
                offered = deferred + pending
                pending, deferred = [], []
            else:
                offered = phase.select(pending)
                claimed = {s.code for s in offered}
                pending = [s for s in pending if s.code not in claimed]

            logger.info(f"Phase '{phase_name.value}': {phase.label} ({len(offered)} sections)")
            self._emit(ScheduleEvent(kind=EventKind.PHASE_START, phase=phase_name.value, label=phase.label))

            outcome = phase.run(offered, context)
            scheduled.extend(outcome.entries)
            deferred.extend(outcome.deferred)
            scheduled_sections += outcome.scheduled_sections

            phase_reports.append(
                PhaseReport(
                    phase=phase_name.value,
                    offered=outcome.offered,
                    scheduled=outcome.scheduled_sections,
                    deferred=len(outcome.deferred),
                )
            )
            self._emit(
                ScheduleEvent(
                    kind=EventKind.PHASE_END,
                    phase=phase_name.value,
                    label=phase.label,
                    scheduled=outcome.scheduled_sections,
                    deferred=len(outcome.deferred),
                )
            )
            logger.info(
                f"Phase '{phase_name.value}' complete: {outcome.scheduled_sections} scheduled, "
                f"{len(outcome.deferred)} deferred ({scheduled_sections}/{len(eligible)} total)"
            )

        unscheduled = [UnscheduledExam(s, *diagnose_section(s, context)) for s in deferred]
        unscheduled.extend(
            UnscheduledExam(s, UnscheduledReason.NOT_ATTEMPTED, "No configured phase handled this section")
            for s in pending
        )

        statistics = self._compute_statistics(exams, eligible, excluded, scheduled, scheduled_sections, unscheduled)
        self._report_completion(statistics, unscheduled)

        return ScheduleResult(
            scheduled=scheduled,
            unscheduled=unscheduled,
            excluded=excluded,
            phase_reports=phase_reports,
            statistics=statistics,
            num_days=num_days,
            generation_date=datetime.now().isoformat(),
        )

    def _emit(self, event: ScheduleEvent) -> None:
        """Log an event and forward it to the configured sink."""
        if event.kind in (EventKind.GROUP_SCHEDULED, EventKind.GROUP_DEFERRED):
            status = "scheduled" if event.kind == EventKind.GROUP_SCHEDULED else "deferred"
            count = event.scheduled or event.deferred
            logger.debug(f"  [{event.phase}] {event.label} ({count} sections) {status}")
        if self.event_sink is not None:
            self.event_sink(event)

    def _compute_statistics(
        self,
        exams: list[ExamSection],
        eligible: list[ExamSection],
        excluded: list[ExamSection],
        scheduled: list[ScheduledExam],
        scheduled_sections: int,
        unscheduled: list[UnscheduledExam],
    ) -> ScheduleStatistics:
        """Compute statistics for the finished run."""
        by_day = Counter(entry.day for entry in scheduled)
        by_building = Counter(get_building_from_room(entry.room) for entry in scheduled)

        return ScheduleStatistics(
            total_sections=len(exams),
            excluded=len(excluded),
            eligible=len(eligible),
            scheduled_sections=scheduled_sections,
            scheduled_entries=len(scheduled),
            unscheduled=len(unscheduled),
            by_day=dict(sorted(by_day.items(), key=lambda item: int(item[0].split()[-1]))),
            by_building=dict(sorted(by_building.items())),
        )

    def _report_completion(self, statistics: ScheduleStatistics, unscheduled: list[UnscheduledExam]) -> None:
        """Log final results and emit the run-complete event."""
        limit = self.config.unscheduled_report_limit
        codes = [u.section.code for u in unscheduled]

        logger.info("Final results")
        logger.info(f"  Total eligible exams: {statistics.eligible}")
        logger.info(
            f"  Successfully scheduled: {statistics.scheduled_sections} "
            f"({statistics.scheduled_entries} entries)"
        )
        logger.info(f"  Unscheduled: {statistics.unscheduled}")
        logger.info(f"  Coverage: {statistics.coverage:.2f}%")

        if unscheduled:
            logger.warning("Unscheduled exams:")
            for item in unscheduled[:limit]:
                section = item.section
                logger.warning(
                    f"  - {section.subject_id} ({section.code}): {section.course} Yr {section.year_level}"
                )
            if len(unscheduled) > limit:
                logger.warning(f"  ... and {len(unscheduled) - limit} more")

        self._emit(
            ScheduleEvent(
                kind=EventKind.RUN_COMPLETE,
                label="complete",
                scheduled=statistics.scheduled_sections,
                deferred=statistics.unscheduled,
                coverage=statistics.coverage,
                unscheduled_codes=codes[:limit],
            )
        )


def generate_exam_schedule(
    exams: list[ExamSection],
    rooms: list[str],
    num_days: int,
    config: SchedulerConfig | None = None,
) -> list[ScheduledExam]:
    """Schedule exams and return only the placed entries.

    Args:
        exams: Exam sections to place
        rooms: Room identifiers
        num_days: Number of exam days
        config: Optional scheduler configuration

    Returns:
        Scheduled entries (two per double-unit section)
    """
    return ExamScheduler(config).schedule(exams, rooms, num_days).scheduled
