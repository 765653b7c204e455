"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import AppConfig, load_config
from ..domain.business_hours import BusinessHoursCalculator
from ..domain.exceptions import SlaCalcError
from ..services.sla_metrics import SlaMetricsService

app = typer.Typer(
    name="slacalc",
    help="Business-hours SLA calculator for support tickets",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./slacalc.yaml")
]

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Compute elapsed business time and ticket SLA figures.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _parse_instant_or_exit(value: str, tz: str, label: str):
    try:
        parsed = pendulum.parse(value, tz=tz)
    except ValueError as e:
        console.print(f"[red]Could not parse {label} date '{value}': {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not isinstance(parsed, pendulum.DateTime):
        console.print(f"[red]The {label} value '{value}' is not a date-time.[/red]")
        raise typer.Exit(1)
    return parsed


def _format_minutes(value: float) -> str:
    """Two decimals at most, no trailing zeros."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


@app.command()
def minutes(
    start: Annotated[str, typer.Argument(help="Start of the interval, e.g. '2025-01-06 09:00'")],
    end: Annotated[str, typer.Argument(help="End of the interval, e.g. '2025-01-07 12:30'")],
    config_file: ConfigOption = None,
):
    """
    Print the business minutes between two instants.

    Examples:

        slacalc minutes "2025-01-06 09:00" "2025-01-06 17:00"

        slacalc minutes 2025-01-03T16:00 2025-01-06T10:00 --config team.yaml
    """
    config = _load_config_or_exit(config_file)
    tz = config.timezone

    start_date = _parse_instant_or_exit(start, tz, "start")
    end_date = _parse_instant_or_exit(end, tz, "end")

    calculator = BusinessHoursCalculator(config.build_calendar())
    result = calculator.calculate_business_minutes(start_date, end_date)

    console.print(f"[bold green]{_format_minutes(result)}[/bold green] business minutes")


@app.command()
def ticket(
    ticket_file: Annotated[Path, typer.Argument(help="JSON file with status_history and ticket dates")],
    config_file: ConfigOption = None,
):
    """
    Compute estimate_time and lead_time for a ticket JSON document.
    """
    config = _load_config_or_exit(config_file)

    try:
        with open(ticket_file, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        console.print(f"[bold red]Error:[/bold red] Ticket file not found: {ticket_file}")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid JSON in {ticket_file}: {escape(str(e))}")
        raise typer.Exit(1)

    calculator = BusinessHoursCalculator(config.build_calendar())
    service = SlaMetricsService(calculator, timezone=config.timezone)

    try:
        schedule = service.parse_ticket(payload)
    except SlaCalcError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    metrics = service.calculate(schedule)
    open_date = service.find_open_date(schedule.status_history)

    table = Table(
        title="SLA",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Metric", style="bold yellow")
    table.add_column("Value")

    table.add_row("open date", open_date.format("YYYY-MM-DD HH:mm") if open_date else "-")
    for name, value in metrics.as_form_values().items():
        table.add_row(name, f"{value} min")

    console.print()
    console.print(table)
    console.print()


@app.command()
def holidays(
    config_file: ConfigOption = None,
):
    """
    List the configured work calendar and holidays.
    """
    config = _load_config_or_exit(config_file)

    work_days = ", ".join(WEEKDAY_NAMES[day] for day in sorted(config.work_days))
    console.print(
        f"\n[bold]Work hours:[/bold] {config.work_hours.start:%H:%M} - {config.work_hours.end:%H:%M}"
        f" ({config.timezone})"
    )
    console.print(f"[bold]Work days:[/bold] {work_days}")

    if not config.holidays:
        console.print("[yellow]No holidays configured.[/yellow]\n")
        return

    table = Table(
        title="Holidays",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Weekday", style="dim")

    for day in config.holidays:
        table.add_row(day.isoformat(), WEEKDAY_NAMES[day.weekday()])

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slacalc[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
