"""Loading exam sections, room lists and exported schedules."""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .exceptions import (
    DuplicateSectionError,
    InvalidInputError,
    MissingColumnError,
    UnsupportedFormatError,
)
from .scheduler.models import ExamSection, ScheduledExam

logger = logging.getLogger(__name__)

EXAM_FORMATS = [".json", ".csv", ".xlsx", ".xls"]
ROOM_FORMATS = [".csv", ".json", ".txt"]

# Canonical column -> accepted header spellings (compared case-insensitively)
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "code": ("code", "section", "section_code", "oe_code"),
    "subject_id": ("subject_id", "subject", "subject_code"),
    "title": ("title", "descriptive_title"),
    "course": ("course", "program"),
    "year_level": ("year_level", "year"),
    "instructor": ("instructor",),
    "dept": ("dept", "department"),
    "lec": ("lec", "units", "lecture_units"),
    "student_count": ("student_count", "students", "enrolled"),
    "is_regular": ("is_regular", "regular"),
    "lecture_room": ("lecture_room", "room"),
}

REQUIRED_COLUMNS = ["code", "subject_id"]


def _normalize_header(header: Any) -> str:
    return str(header).strip().lower().replace(" ", "_").replace("-", "_")


def normalize_columns(df: pd.DataFrame, source: str = "") -> pd.DataFrame:
    """Rename DataFrame columns to canonical ExamSection field names.

    Raises:
        MissingColumnError: If a required column has no matching header
    """
    rename: dict[Any, str] = {}
    normalized = {_normalize_header(col): col for col in df.columns}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized and normalized[alias] not in rename:
                rename[normalized[alias]] = canonical
                break

    df = df.rename(columns=rename)
    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise MissingColumnError(column, source=source)

    return df[[c for c in COLUMN_ALIASES if c in df.columns]]


def sections_from_records(records: list[dict[str, Any]], source: str = "") -> list[ExamSection]:
    """Build ExamSections from raw records, rejecting blank and duplicate codes.

    Raises:
        InvalidInputError: If a record has no code, no subject or a non-numeric count
        DuplicateSectionError: If two records share a code
    """
    sections: list[ExamSection] = []
    seen: set[str] = set()

    for row, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise InvalidInputError("expected an object per exam", source=source, row=row)

        try:
            section = ExamSection.from_dict(record)
        except (ValueError, TypeError) as e:
            raise InvalidInputError(str(e), source=source, row=row) from e
        if not section.code:
            raise InvalidInputError("section code is empty", source=source, row=row)
        if not section.subject_id:
            raise InvalidInputError(f"subject is empty for section '{section.code}'", source=source, row=row)
        if section.code in seen:
            raise DuplicateSectionError(section.code, source=source)

        seen.add(section.code)
        sections.append(section)

    return sections


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    return pd.read_excel(path, sheet_name=0, dtype=str).fillna("")


def load_exam_sections(path: Path | str) -> list[ExamSection]:
    """Load exam sections from JSON, CSV or Excel.

    JSON may be a list of objects or an object with an 'exams' list.
    Tabular headers are matched case-insensitively against snake_case
    names and the registrar's upper-case export columns.

    Args:
        path: Path to the exam file

    Returns:
        Exam sections in file order

    Raises:
        UnsupportedFormatError: For unknown file extensions
        InvalidInputError: For malformed content
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    source = str(file_path)

    if suffix not in EXAM_FORMATS:
        raise UnsupportedFormatError(source, EXAM_FORMATS)

    if suffix == ".json":
        with open(file_path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidInputError(f"not valid JSON ({e.msg})", source=source) from e
        if isinstance(data, dict):
            data = data.get("exams", data.get("sections"))
        if not isinstance(data, list):
            raise InvalidInputError("expected a list of exams or an object with 'exams'", source=source)
        records = data
    else:
        df = normalize_columns(_read_table(file_path), source=source)
        records = df.to_dict(orient="records")

    sections = sections_from_records(records, source=source)
    logger.info(f"Loaded {len(sections)} exam sections from {file_path.name}")
    return sections


def _unique_rooms(values: list[Any]) -> list[str]:
    rooms: list[str] = []
    seen: set[str] = set()
    for value in values:
        room = "" if value is None else str(value).strip()
        if room and room not in seen:
            seen.add(room)
            rooms.append(room)
    return rooms


def load_rooms(path: Path | str) -> list[str]:
    """Load room identifiers.

    Supported inputs:
    - .csv: column 'room' or 'name', otherwise the first column
    - .json: list of strings or an object with a 'rooms' list
    - .txt: one room per line

    Blank entries are dropped and duplicates keep their first position.

    Raises:
        UnsupportedFormatError: For unknown file extensions
        InvalidInputError: For malformed content
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    source = str(file_path)

    if suffix not in ROOM_FORMATS:
        raise UnsupportedFormatError(source, ROOM_FORMATS)

    if suffix == ".csv":
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        if df.columns.empty:
            raise InvalidInputError("room file has no columns", source=source)
        columns = {_normalize_header(c): c for c in df.columns}
        column = columns.get("room", columns.get("name", df.columns[0]))
        values = df[column].tolist()
    elif suffix == ".json":
        with open(file_path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidInputError(f"not valid JSON ({e.msg})", source=source) from e
        if isinstance(data, dict):
            data = data.get("rooms")
        if not isinstance(data, list):
            raise InvalidInputError("expected a list of rooms or an object with 'rooms'", source=source)
        values = data
    else:
        with open(file_path, encoding="utf-8") as f:
            values = f.read().splitlines()

    rooms = _unique_rooms(values)
    logger.info(f"Loaded {len(rooms)} rooms from {file_path.name}")
    return rooms


def load_schedule_entries(path: Path | str) -> list[ScheduledExam]:
    """Load scheduled entries from a JSON schedule export.

    Accepts the full export (object with 'scheduled') or a bare list.

    Raises:
        InvalidInputError: If the file is not a schedule export
    """
    file_path = Path(path)
    source = str(file_path)

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"not valid JSON ({e.msg})", source=source) from e

    if isinstance(data, dict):
        data = data.get("scheduled")
    if not isinstance(data, list):
        raise InvalidInputError("expected an object with a 'scheduled' list", source=source)

    entries = []
    for row, record in enumerate(data, start=1):
        try:
            entries.append(ScheduledExam.from_dict(record))
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidInputError(str(e), source=source, row=row) from e
    return entries
