"""Constants for exam schedule generation."""

# Time slots definition
# Each exam block is 90 minutes, eight blocks per day
TIME_SLOTS = [
    "7:30-9:00",
    "9:00-10:30",
    "10:30-12:00",
    "12:00-1:30",
    "1:30-3:00",
    "3:00-4:30",
    "4:30-6:00",
    "6:00-7:30",
]

# Lecture units that require two consecutive slots in the same room
DOUBLE_UNIT_LEC = 6

# Departments removed before scheduling (student affairs)
STUDENT_AFFAIRS_DEPT = "SAS"

# Mathematics tier applies only to MATH subjects owned by this department
MATH_PREFIX = "MATH"
MATH_DEPARTMENT = "SACE"

ARCH_SUBSTRING = "ARCH"

# Architecture building first, then the fallback building
ARCH_BUILDINGS = ["C", "K"]

# Department keyword -> allowed buildings, matched in order by substring
DEPARTMENT_BUILDINGS: list[tuple[tuple[str, ...], list[str]]] = [
    (("SECAP", "ACCT", "ECON", "BSBA"), ["A", "J", "B"]),
    (("SABH", "NURS", "SBH"), ["A"]),
    (("SACE", "SCE", "CENG", "ENG"), ["N", "K", "C"]),
    (("SHAS", "HUMSS", "HUM"), ["L", "M", "N", "K", "J"]),
]

DEFAULT_BUILDINGS = ["A", "N", "K", "L", "M", "J", "B", "C"]

# Building prefix of a room identifier such as "N-201"
ROOM_BUILDING_PATTERN = r"^([A-Z]+)-"

# General education categories in declaration order.
# Pinned blocks are (day index, slot index, capacity); capacity is advisory
# unless SchedulerConfig.enforce_block_capacity is set.
GEN_ED_CATEGORIES: dict[str, dict] = {
    "ethics": {
        "prefixes": ["ETHC"],
        "blocks": [(0, 0, 40), (1, 0, 40)],
    },
    "english": {
        "prefixes": ["ENGL"],
        "blocks": [(0, 1, 40), (1, 1, 40)],
    },
    "physical_education": {
        "prefixes": ["PHED"],
        "blocks": [(0, 2, 30), (1, 2, 30)],
    },
    "cfed": {
        "prefixes": ["CFED"],
        "blocks": [(0, 3, 40), (1, 3, 40)],
    },
    "communication": {
        "prefixes": ["CONW"],
        "blocks": [(2, 0, 30), (2, 1, 30)],
    },
    "language": {
        "prefixes": ["LANG", "JAPN", "CHIN", "SPAN"],
        "blocks": [(2, 2, 30), (2, 3, 30)],
    },
    "literature": {
        "prefixes": ["LITR"],
        "blocks": [(3, 0, 30), (3, 1, 30)],
    },
    "research": {
        "prefixes": ["RESM"],
        "blocks": [],
    },
}

# Subject groups larger than this are split into batches by the major phase
DEFAULT_BATCH_SIZE = 35

# Unscheduled section codes reported in events and logs
UNSCHEDULED_REPORT_LIMIT = 20


def get_day_label(day_index: int) -> str:
    """Get the display label for a zero-based day index (0 -> 'Day 1')."""
    return f"Day {day_index + 1}"


def get_slot_label(slot_index: int) -> str:
    """Get the time range label for a zero-based slot index.

    Args:
        slot_index: Slot index (0-7)

    Returns:
        Time range string, or empty string if the index is out of range
    """
    if 0 <= slot_index < len(TIME_SLOTS):
        return TIME_SLOTS[slot_index]
    return ""


def parse_day_label(label: str) -> int:
    """Convert a day label back to its zero-based index ('Day 3' -> 2).

    Raises:
        ValueError: If the label is not of the form 'Day N'
    """
    prefix, _, number = label.strip().partition(" ")
    if prefix.lower() != "day" or not number.isdigit() or int(number) < 1:
        raise ValueError(f"Invalid day label: '{label}'")
    return int(number) - 1


def parse_slot_label(label: str) -> int:
    """Convert a slot label back to its zero-based index.

    Raises:
        ValueError: If the label is not one of TIME_SLOTS
    """
    try:
        return TIME_SLOTS.index(label.strip())
    except ValueError:
        raise ValueError(f"Invalid slot label: '{label}'") from None
