"""Scheduling phase strategies run in sequence by the orchestrator."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

from .classifier import CATEGORIES, classify, get_gen_ed_category
from .config import SchedulerConfig
from .groups import (
    PlacementContext,
    group_by_subject,
    place_group,
    place_group_anywhere,
    place_in_batches,
)
from .models import (
    EventKind,
    ExamSection,
    GenEdCategory,
    PhaseName,
    PriorityTier,
    ScheduledExam,
    ScheduleEvent,
)

logger = logging.getLogger(__name__)

EventSink = Callable[[ScheduleEvent], None]


@dataclass
class PhaseOutcome:
    """Entries placed by a phase and sections it carries forward."""

    entries: list[ScheduledExam] = field(default_factory=list)
    deferred: list[ExamSection] = field(default_factory=list)
    offered: int = 0

    @property
    def scheduled_sections(self) -> int:
        return self.offered - len(self.deferred)


class PhaseBase(ABC):
    """Base class for phase strategies.

    A group phase claims its own category from the sections no phase has
    seen yet (`select`) and tries to place them (`run`). Whatever it cannot
    place is returned as deferred for the individual phase.
    """

    name: PhaseName
    label: str = ""

    def __init__(self, config: SchedulerConfig, emit: EventSink) -> None:
        self.config = config
        self.emit = emit

    def select(self, pending: list[ExamSection]) -> list[ExamSection]:
        """Pick the sections this phase is responsible for, keeping order."""
        return list(pending)

    @abstractmethod
    def run(self, sections: list[ExamSection], context: PlacementContext) -> PhaseOutcome:
        """Place the given sections, mutating the ledger in the context."""
        pass

    def _report_group(
        self,
        subject: str,
        sections: list[ExamSection],
        placed: bool,
        category: str = "",
    ) -> None:
        kind = EventKind.GROUP_SCHEDULED if placed else EventKind.GROUP_DEFERRED
        self.emit(
            ScheduleEvent(
                kind=kind,
                phase=self.name.value,
                label=subject,
                category=category,
                scheduled=len(sections) if placed else 0,
                deferred=0 if placed else len(sections),
            )
        )


class GenEdPhase(PhaseBase):
    """General education subjects at their category's pinned blocks.

    Each subject group tries its category's blocks in declared order only.
    Categories without blocks scan the full grid.
    """

    name = PhaseName.GEN_ED
    label = "General Education"

    def select(self, pending: list[ExamSection]) -> list[ExamSection]:
        return [s for s in pending if get_gen_ed_category(s.subject_id) is not None]

    def run(self, sections: list[ExamSection], context: PlacementContext) -> PhaseOutcome:
        outcome = PhaseOutcome(offered=len(sections))

        by_category: dict[str, list[ExamSection]] = {category.name: [] for category in CATEGORIES}
        for section in sections:
            by_category[get_gen_ed_category(section.subject_id).name].append(section)

        for category in CATEGORIES:
            members = by_category[category.name]
            if not members:
                continue
            logger.debug(f"  {category.name}: {len(members)} sections")
            block_usage: dict[tuple[int, int], int] = {}

            for subject, group in group_by_subject(members).items():
                if category.blocks:
                    entries = self._place_at_blocks(group, category, context, block_usage)
                else:
                    entries = place_group_anywhere(group, context, self.name.value)

                if entries is None:
                    outcome.deferred.extend(group)
                else:
                    outcome.entries.extend(entries)
                self._report_group(subject, group, entries is not None, category.name)

        return outcome

    def _place_at_blocks(
        self,
        group: list[ExamSection],
        category: GenEdCategory,
        context: PlacementContext,
        block_usage: dict[tuple[int, int], int],
    ) -> list[ScheduledExam] | None:
        """Try the category's pinned blocks in order; blocks outside the grid are skipped."""
        for block in category.blocks:
            if not context.grid.contains(block.day, block.slot):
                continue
            key = (block.day, block.slot)
            if self.config.enforce_block_capacity and block_usage.get(key, 0) + len(group) > block.capacity:
                continue
            entries = place_group(group, block.day, block.slot, context, self.name.value)
            if entries is not None:
                block_usage[key] = block_usage.get(key, 0) + len(group)
                return entries
        return None


class PriorityPhase(PhaseBase):
    """Mathematics groups, then architecture groups, across the full grid."""

    name = PhaseName.PRIORITY
    label = "High Priority (Math, Architecture)"

    TIERS = (PriorityTier.MATH, PriorityTier.ARCH)

    def select(self, pending: list[ExamSection]) -> list[ExamSection]:
        return [s for s in pending if classify(s) in self.TIERS]

    def run(self, sections: list[ExamSection], context: PlacementContext) -> PhaseOutcome:
        outcome = PhaseOutcome(offered=len(sections))

        for tier in self.TIERS:
            members = [s for s in sections if classify(s) == tier]
            for subject, group in group_by_subject(members).items():
                entries = place_group_anywhere(group, context, self.name.value)
                if entries is None:
                    outcome.deferred.extend(group)
                else:
                    outcome.entries.extend(entries)
                self._report_group(subject, group, entries is not None, tier.value)

        return outcome


class MajorPhase(PhaseBase):
    """Remaining subject groups, smallest first, split into batches when oversized."""

    name = PhaseName.MAJOR
    label = "Major Subjects"

    def run(self, sections: list[ExamSection], context: PlacementContext) -> PhaseOutcome:
        outcome = PhaseOutcome(offered=len(sections))

        # sorted() is stable, so equal sizes keep encounter order
        groups = sorted(group_by_subject(sections).items(), key=lambda item: len(item[1]))

        for subject, group in groups:
            entries, failed = place_in_batches(group, self.config.batch_size, context, self.name.value)
            outcome.entries.extend(entries)
            outcome.deferred.extend(failed)

            if failed and len(failed) < len(group):
                failed_codes = {s.code for s in failed}
                placed = [s for s in group if s.code not in failed_codes]
                logger.debug(f"  {subject}: {len(placed)} placed in batches, {len(failed)} deferred")
                self._report_group(subject, placed, True, classify(group[0]).value)
                self._report_group(subject, failed, False, classify(group[0]).value)
            else:
                self._report_group(subject, group, not failed, classify(group[0]).value)

        return outcome


class IndividualPhase(PhaseBase):
    """Relaxed retry: every carried section on its own, first fitting cell wins."""

    name = PhaseName.INDIVIDUAL
    label = "Individual Relaxed Retry"

    def run(self, sections: list[ExamSection], context: PlacementContext) -> PhaseOutcome:
        outcome = PhaseOutcome(offered=len(sections))

        for section in sections:
            entries = place_group_anywhere([section], context, self.name.value)
            if entries is None:
                outcome.deferred.append(section)
            else:
                outcome.entries.extend(entries)
            self._report_group(section.code, [section], entries is not None, classify(section).value)

        return outcome


PHASE_CLASSES: dict[PhaseName, type[PhaseBase]] = {
    PhaseName.GEN_ED: GenEdPhase,
    PhaseName.PRIORITY: PriorityPhase,
    PhaseName.MAJOR: MajorPhase,
    PhaseName.INDIVIDUAL: IndividualPhase,
}


def create_phase(name: PhaseName, config: SchedulerConfig, emit: EventSink) -> PhaseBase:
    """Instantiate the strategy for a phase name."""
    return PHASE_CLASSES[name](config, emit)
