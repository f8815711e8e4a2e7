"""Scheduler configuration."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..exceptions import InvalidConfigError
from .constants import DEFAULT_BATCH_SIZE, STUDENT_AFFAIRS_DEPT, UNSCHEDULED_REPORT_LIMIT
from .models import PhaseName

# Pinned general education blocks, then math/architecture, then the rest
# by group size, then individual retry.
DEFAULT_PHASE_ORDER: tuple[PhaseName, ...] = (
    PhaseName.GEN_ED,
    PhaseName.PRIORITY,
    PhaseName.MAJOR,
    PhaseName.INDIVIDUAL,
)

# Every subject competes in one size-sorted batch pass, then individual retry.
SIZE_FIRST_PHASE_ORDER: tuple[PhaseName, ...] = (
    PhaseName.MAJOR,
    PhaseName.INDIVIDUAL,
)

PHASE_PRESETS: dict[str, tuple[PhaseName, ...]] = {
    "default": DEFAULT_PHASE_ORDER,
    "size_first": SIZE_FIRST_PHASE_ORDER,
}


def parse_phases(value: str | list | tuple) -> tuple[PhaseName, ...]:
    """Parse a phase list from names, a comma-separated string, or a preset name.

    Raises:
        InvalidConfigError: On unknown names, duplicates, or an empty list
    """
    if isinstance(value, str):
        if value.strip() in PHASE_PRESETS:
            return PHASE_PRESETS[value.strip()]
        items = [part.strip() for part in value.split(",") if part.strip()]
    else:
        items = list(value)

    if not items:
        raise InvalidConfigError("phase list is empty")

    phases: list[PhaseName] = []
    for item in items:
        try:
            phase = PhaseName(item.value if isinstance(item, PhaseName) else str(item).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in PhaseName)
            raise InvalidConfigError(f"unknown phase '{item}'. Valid phases: {valid}") from None
        if phase in phases:
            raise InvalidConfigError(f"phase '{phase.value}' listed more than once")
        phases.append(phase)
    return tuple(phases)


@dataclass
class SchedulerConfig:
    """Tunable settings of the exam scheduler.

    Attributes:
        phases: Ordered phase strategies to run
        batch_size: Subject groups larger than this are split by the major phase
        excluded_departments: Departments removed before all phases
        enforce_block_capacity: Cap sections per pinned block at its capacity.
            Off by default; block capacity is advisory.
        unscheduled_report_limit: Number of unscheduled codes reported in events
    """

    phases: tuple[PhaseName, ...] = DEFAULT_PHASE_ORDER
    batch_size: int = DEFAULT_BATCH_SIZE
    excluded_departments: tuple[str, ...] = (STUDENT_AFFAIRS_DEPT,)
    enforce_block_capacity: bool = False
    unscheduled_report_limit: int = UNSCHEDULED_REPORT_LIMIT

    def __post_init__(self) -> None:
        self.phases = parse_phases(self.phases)
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int) or self.batch_size < 1:
            raise InvalidConfigError(f"batch_size must be a positive integer, got {self.batch_size!r}")
        if self.unscheduled_report_limit < 0:
            raise InvalidConfigError("unscheduled_report_limit must not be negative")
        self.excluded_departments = tuple(d.upper().strip() for d in self.excluded_departments)

    def is_excluded(self, dept: str) -> bool:
        """Check if a department is removed before scheduling."""
        return dept.upper().strip() in self.excluded_departments

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchedulerConfig":
        """Create a config from a dictionary.

        Raises:
            InvalidConfigError: On unknown keys or invalid values
        """
        known = {"phases", "batch_size", "excluded_departments", "enforce_block_capacity", "unscheduled_report_limit"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(f"unknown keys: {', '.join(unknown)}")
        kwargs: dict[str, Any] = {key: data[key] for key in known if key in data}
        if "excluded_departments" in kwargs:
            departments = kwargs["excluded_departments"]
            if isinstance(departments, str):
                departments = [departments]
            kwargs["excluded_departments"] = tuple(departments)
        if "enforce_block_capacity" in kwargs:
            kwargs["enforce_block_capacity"] = bool(kwargs["enforce_block_capacity"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phases": [p.value for p in self.phases],
            "batch_size": self.batch_size,
            "excluded_departments": list(self.excluded_departments),
            "enforce_block_capacity": self.enforce_block_capacity,
            "unscheduled_report_limit": self.unscheduled_report_limit,
        }


def load_config(path: Path | str | None = None) -> SchedulerConfig:
    """Load scheduler configuration from a JSON file.

    Args:
        path: Path to a JSON object with SchedulerConfig fields. None or a
              missing file yields the defaults.

    Raises:
        InvalidConfigError: If the file is not a JSON object or has bad values
    """
    if path is None:
        return SchedulerConfig()

    config_path = Path(path)
    if not config_path.exists():
        return SchedulerConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"not valid JSON ({e.msg})", source=str(config_path)) from e

    if not isinstance(data, dict):
        raise InvalidConfigError("expected a JSON object", source=str(config_path))

    return SchedulerConfig.from_dict(data)
