"""CLI entry point for the exam scheduler."""

import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import ExamSchedulerError
from .exporters import get_exporter
from .loaders import load_exam_sections, load_rooms, load_schedule_entries
from .scheduler import ExamScheduler, ScheduleResult, load_config
from .validators import validate_schedule

app = typer.Typer(
    name="exam-scheduler",
    help="Assign university exam sections to days, time slots and rooms",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


DEFAULT_OUTPUT = Path("output/exam-schedule")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


@app.command()
def schedule(
    exams_file: Annotated[
        Path,
        typer.Argument(help="Exam sections file (.json, .csv or .xlsx)"),
    ],
    rooms_file: Annotated[
        Path,
        typer.Argument(help="Rooms file (.csv, .json or .txt)"),
    ],
    days: Annotated[
        int,
        typer.Option("-d", "--days", help="Number of exam days"),
    ] = 5,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    config_file: Annotated[
        Optional[Path],
        typer.Option("-c", "--config", help="Scheduler configuration JSON"),
    ] = None,
    batch_size: Annotated[
        Optional[int],
        typer.Option("--batch-size", help="Split subject groups larger than this"),
    ] = None,
    phases: Annotated[
        Optional[str],
        typer.Option("--phases", help="Comma-separated phases or preset ('default', 'size_first')"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate an exam schedule."""
    _configure_logging(verbose)

    for path in (exams_file, rooms_file):
        if not path.exists():
            _fail(f"File not found: {path}")
    if config_file is not None and not config_file.exists():
        _fail(f"Config file not found: {config_file}")

    try:
        config = load_config(config_file)
        if batch_size is not None:
            config = replace(config, batch_size=batch_size)
        if phases is not None:
            config = replace(config, phases=phases)

        with console.status("[bold green]Loading input..."):
            sections = load_exam_sections(exams_file)
            rooms = load_rooms(rooms_file)

        console.print(f"\n[bold]Exam Schedule Generation for:[/bold] {exams_file.name}")
        console.print(f"  Sections: {len(sections)}")
        console.print(f"  Rooms: {len(rooms)}")
        console.print(f"  Days: {days}")
        console.print(f"  Phases: {', '.join(p.value for p in config.phases)}")

        with console.status("[bold green]Creating schedule..."):
            result = ExamScheduler(config).schedule(sections, rooms, days)

        _show_results(result, verbose, config.unscheduled_report_limit)

        exporter = get_exporter(format.value)
        target = output or DEFAULT_OUTPUT
        with console.status(f"[bold green]Exporting to {format.value}..."):
            written = exporter.export(result, target)
    except ExamSchedulerError as e:
        _fail(str(e))

    console.print(f"\n[bold green]✓[/bold green] Exported to: {written}")


def _show_results(result: ScheduleResult, verbose: bool, limit: int) -> None:
    """Show schedule summary tables."""
    stats = result.statistics

    console.print("\n[bold]Schedule Results:[/bold]")
    console.print(f"  Eligible sections: {stats.eligible} (excluded {stats.excluded})")
    console.print(f"  Scheduled: {stats.scheduled_sections} ({stats.scheduled_entries} entries)")
    console.print(f"  Unscheduled: {stats.unscheduled}")
    console.print(f"  Coverage: {stats.coverage:.2f}%")

    phase_table = Table(title="Phases")
    phase_table.add_column("Phase", style="cyan")
    phase_table.add_column("Offered", style="blue")
    phase_table.add_column("Scheduled", style="green")
    phase_table.add_column("Deferred", style="yellow")
    for report in result.phase_reports:
        phase_table.add_row(report.phase, str(report.offered), str(report.scheduled), str(report.deferred))
    console.print(phase_table)

    if verbose and stats.by_day:
        console.print("\n[bold]Distribution by day:[/bold]")
        for day, count in stats.by_day.items():
            console.print(f"  {day}: {count}")

    if verbose and stats.by_building:
        console.print("\n[bold]Entries by building:[/bold]")
        for building, count in stats.by_building.items():
            console.print(f"  {building or '?'}: {count}")

    if result.unscheduled:
        console.print(f"\n[bold yellow]Unscheduled sections ({len(result.unscheduled)}):[/bold yellow]")
        for item in result.unscheduled[:limit]:
            section = item.section
            console.print(f"  [yellow]- {section.subject_id} ({section.code}): {item.reason.value}[/yellow]")
        if len(result.unscheduled) > limit:
            console.print(f"  [yellow]... and {len(result.unscheduled) - limit} more[/yellow]")


@app.command()
def validate(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON produced by the schedule command"),
    ],
) -> None:
    """Check an exported schedule for double bookings, cohort conflicts and room rules."""
    if not schedule_file.exists():
        _fail(f"File not found: {schedule_file}")

    try:
        entries = load_schedule_entries(schedule_file)
    except ExamSchedulerError as e:
        _fail(str(e))

    errors = validate_schedule(entries)

    console.print(f"\n[bold]Validation Results for:[/bold] {schedule_file.name}")
    console.print(f"  Entries checked: {len(entries)}")

    if not errors:
        console.print("[bold green]✓ Schedule is valid[/bold green]")
        return

    console.print(f"[bold red]✗ {len(errors)} violation(s)[/bold red]")
    for error in errors:
        console.print(f"  [red]• {error}[/red]")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
