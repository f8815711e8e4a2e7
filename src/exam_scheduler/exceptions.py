"""Custom exceptions for the exam scheduler."""


class ExamSchedulerError(Exception):
    """Base exception for exam scheduler errors."""

    pass


class InvalidInputError(ExamSchedulerError):
    """Input data could not be read or validated."""

    def __init__(self, message: str, source: str | None = None, row: int | None = None):
        self.source = source
        self.row = row
        location = ""
        if source:
            location += f" in '{source}'"
        if row is not None:
            location += f" at row {row}"
        super().__init__(f"Invalid input{location}: {message}")


class MissingColumnError(InvalidInputError):
    """A required column is missing from tabular input."""

    def __init__(self, column: str, source: str | None = None):
        self.column = column
        super().__init__(f"required column '{column}' not found", source=source)


class UnsupportedFormatError(InvalidInputError):
    """File extension is not one the loader understands."""

    def __init__(self, path: str, supported: list[str]):
        self.path = path
        self.supported = supported
        super().__init__(
            f"unsupported file type. Supported: {', '.join(supported)}",
            source=path,
        )


class DuplicateSectionError(InvalidInputError):
    """Two exam sections share the same section code."""

    def __init__(self, code: str, source: str | None = None):
        self.code = code
        super().__init__(f"duplicate section code '{code}'", source=source)


class InvalidRoomListError(ExamSchedulerError):
    """Room list is empty, so no placement is possible."""

    def __init__(self, message: str = "Room list is empty; at least one room is required"):
        super().__init__(message)


class InvalidDayCountError(ExamSchedulerError):
    """Day count does not describe a usable scheduling grid."""

    def __init__(self, num_days: int):
        self.num_days = num_days
        super().__init__(f"Invalid day count: {num_days}. Must be a positive integer")


class InvalidConfigError(ExamSchedulerError):
    """Scheduler configuration value is invalid."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        location = f" in '{source}'" if source else ""
        super().__init__(f"Invalid configuration{location}: {message}")


class RoomAlreadyBookedError(ExamSchedulerError):
    """Attempt to book a room that is already occupied at (day, slot)."""

    def __init__(self, room: str, day: int, slot: int):
        self.room = room
        self.day = day
        self.slot = slot
        super().__init__(f"Room '{room}' is already booked on day {day + 1} slot {slot + 1}")
