"""Export functionality for exam schedule results."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .scheduler.models import ScheduleResult

SCHEDULE_COLUMNS = [
    "day",
    "slot",
    "room",
    "code",
    "subject_id",
    "title",
    "course",
    "year_level",
    "instructor",
    "dept",
    "units",
    "student_count",
    "priority",
    "phase",
    "is_regular",
    "lecture_room",
]

UNSCHEDULED_COLUMNS = [
    "code",
    "subject_id",
    "title",
    "course",
    "year_level",
    "dept",
    "lec",
    "student_count",
    "reason",
    "details",
]

FONT_HEADER = Font(bold=True)
ALIGN_HEADER = Alignment(horizontal="center", vertical="center")
MAX_COLUMN_WIDTH = 40


def _schedule_rows(result: ScheduleResult) -> list[dict]:
    rows = []
    for entry in result.scheduled:
        data = entry.to_dict()
        rows.append({column: data.get(column) for column in SCHEDULE_COLUMNS})
    return rows


def _unscheduled_rows(result: ScheduleResult) -> list[dict]:
    rows = []
    for item in result.unscheduled:
        data = item.to_dict()
        rows.append({column: data.get(column) for column in UNSCHEDULED_COLUMNS})
    return rows


def _summary_rows(result: ScheduleResult) -> list[dict]:
    stats = result.statistics
    return [
        {"metric": "generation_date", "value": result.generation_date},
        {"metric": "num_days", "value": result.num_days},
        {"metric": "total_sections", "value": stats.total_sections},
        {"metric": "excluded", "value": stats.excluded},
        {"metric": "eligible", "value": stats.eligible},
        {"metric": "scheduled_sections", "value": stats.scheduled_sections},
        {"metric": "scheduled_entries", "value": stats.scheduled_entries},
        {"metric": "unscheduled", "value": stats.unscheduled},
        {"metric": "coverage", "value": round(stats.coverage, 2)},
    ]


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: ScheduleResult, output_path: str | Path) -> Path:
        """Export schedule result to file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output file or directory

        Returns:
            Path actually written
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleResult, output_path: str | Path) -> Path:
        """Export schedule result to a JSON file."""
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_suffix(".json")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )
        return output_path


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> Path:
        """Export schedule result to CSV files.

        Creates three files:
        - schedule.csv: All scheduled entries
        - unscheduled.csv: Sections that could not be placed
        - summary.csv: Overall summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output directory (a file path uses its stem)
        """
        output_dir = Path(output_path)
        if output_dir.suffix:
            output_dir = output_dir.parent / output_dir.stem
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "schedule.csv", _schedule_rows(result), SCHEDULE_COLUMNS)
        self._write_csv(output_dir / "unscheduled.csv", _unscheduled_rows(result), UNSCHEDULED_COLUMNS)
        self._write_csv(output_dir / "summary.csv", _summary_rows(result), ["metric", "value"])
        return output_dir

    def _write_csv(self, output_path: Path, rows: list[dict], fieldnames: list[str]) -> None:
        """Write rows to CSV file; a header is written even without rows."""
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> Path:
        """Export schedule result to an Excel file.

        Creates workbook with sheets:
        - Schedule: Scheduled entries, ordered by day, slot and room
        - Unscheduled: Sections that could not be placed
        - Phases: Per-phase outcome
        - Summary: Overall summary
        """
        output_path = Path(output_path)
        if output_path.suffix.lower() != ".xlsx":
            output_path = output_path.with_suffix(".xlsx")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        order = [(e.day_index, e.slot_index, e.room) for e in result.scheduled]
        rows = [row for _, row in sorted(zip(order, _schedule_rows(result)), key=lambda item: item[0])]
        schedule_df = pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            schedule_df.to_excel(writer, sheet_name="Schedule", index=False)
            pd.DataFrame(_unscheduled_rows(result), columns=UNSCHEDULED_COLUMNS).to_excel(
                writer, sheet_name="Unscheduled", index=False
            )
            pd.DataFrame(
                [p.to_dict() for p in result.phase_reports],
                columns=["phase", "offered", "scheduled", "deferred"],
            ).to_excel(writer, sheet_name="Phases", index=False)
            pd.DataFrame(_summary_rows(result)).to_excel(writer, sheet_name="Summary", index=False)

            for ws in writer.sheets.values():
                self._format_sheet(ws)

        return output_path

    def _format_sheet(self, ws) -> None:
        """Bold the header row, freeze it and size columns to their content."""
        for cell in ws[1]:
            cell.font = FONT_HEADER
            cell.alignment = ALIGN_HEADER
        ws.freeze_panes = "A2"

        for index, column in enumerate(ws.iter_cols(), start=1):
            width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
            ws.column_dimensions[get_column_letter(index)].width = min(width + 2, MAX_COLUMN_WIDTH)


def get_exporter(format: str) -> BaseExporter:
    """Get exporter by format name.

    Args:
        format: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
        "xlsx": ExcelExporter,
    }

    exporter_class = exporters.get(format.lower())
    if exporter_class is None:
        raise ValueError(f"Unsupported format: {format}. Supported: {', '.join(exporters.keys())}")

    return exporter_class()
