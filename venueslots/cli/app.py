"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.http_store import HttpReservationStore
from ..config import AppConfig, get_default_config_path
from ..domain.availability import require_slot_run
from ..domain.exceptions import OutOfRange, ScheduleError, SlotNotFound
from ..domain.models import DaySchedule, SlotStatus
from ..services.factory import build_service, build_store

app = typer.Typer(
    name="venueslots",
    help="Day schedules and slot availability for venue machines",
    add_completion=False
)

console = Console()

_STATUS_STYLES = {
    SlotStatus.AVAILABLE: "green",
    SlotStatus.BOOKED: "bold red",
    SlotStatus.PASSED: "dim",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _resolve_reference(config: AppConfig, at: Optional[str], ignore_time: bool) -> Optional[str]:
    """
    Decide which instant counts as "now" for marking passed slots.

    ``--ignore-time`` passes no reference instant at all, which shows every
    unbooked slot as available.
    """
    if ignore_time:
        return None
    if at:
        return at
    return pendulum.now(config.timezone).to_iso8601_string()


def _render_schedule(schedule: DaySchedule, bookable: Optional[list] = None) -> Table:
    table = Table(
        title=f"{schedule.machine_id} · {schedule.date} ({schedule.timezone})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Slot", style="bold")
    table.add_column("Status")
    table.add_column("Booking", style="dim")

    for slot in schedule.slots:
        style = _STATUS_STYLES.get(slot.status, "")
        status = slot.status.value if slot.status else "-"
        if bookable is not None and slot.start_time in bookable:
            status += " ✓"
        booking = slot.booking_ref or ""
        if slot.is_cross_midnight:
            booking += " (cross-midnight)"
        table.add_row(
            f"{slot.start_time} – {slot.end_time}",
            f"[{style}]{status}[/{style}]" if style else status,
            booking
        )

    return table


@app.command()
def schedule(
    machine_id: Annotated[str, typer.Argument(help="Machine identifier")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today in the shop timezone.")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Reference instant (ISO 8601) for marking passed slots. Defaults to now.")] = None,
    ignore_time: Annotated[bool, typer.Option("--ignore-time", help="Do not mark any slot as passed.")] = False,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Mark start times where a reservation of this many minutes fits.")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the slot grid of a machine for one day.

    Examples:

        venueslots schedule machine-001
        venueslots schedule machine-001 --date 2026-01-15 --duration 60
        venueslots schedule machine-001 --ignore-time
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = build_service(config)
        target = date or pendulum.now(config.timezone).to_date_string()

        day = asyncio.run(
            service.compute_day_schedule(
                machine_id=machine_id,
                date=target,
                reference_instant=_resolve_reference(config, at, ignore_time),
            )
        )

        bookable = None
        if duration is not None:
            bookable = service.calculator.bookable_start_times(day, duration)

        console.print()
        console.print(_render_schedule(day, bookable))
        console.print(
            f"\n[bold]{day.available_slots}[/bold] available · "
            f"[bold]{day.booked_slots}[/bold] booked · "
            f"[bold]{day.passed_slots}[/bold] passed · "
            f"{day.total_slots} total\n"
        )

    except (FileNotFoundError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def check(
    machine_id: Annotated[str, typer.Argument(help="Machine identifier")],
    start_time: Annotated[str, typer.Argument(help="Requested start time (HH:mm), must be a slot boundary")],
    duration: Annotated[int, typer.Option("--duration", help="Reservation length in minutes")] = 60,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today in the shop timezone.")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Reference instant (ISO 8601). Defaults to now.")] = None,
    ignore_time: Annotated[bool, typer.Option("--ignore-time", help="Do not treat any slot as passed.")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a reservation fits. Exits with 1 when it does not.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = build_service(config)
        target = date or pendulum.now(config.timezone).to_date_string()

        day = asyncio.run(
            service.compute_day_schedule(
                machine_id=machine_id,
                date=target,
                reference_instant=_resolve_reference(config, at, ignore_time),
            )
        )

        try:
            run = require_slot_run(day, start_time, duration, service.calculator.slot_duration_minutes)
        except (SlotNotFound, OutOfRange) as e:
            console.print(f"[yellow]✗ Not available:[/yellow] {e}")
            raise typer.Exit(1)

        blocked = [slot for slot in run if not slot.is_available]
        if blocked:
            slots = ", ".join(f"{slot.start_time} ({slot.status.value})" for slot in blocked)
            console.print(f"[yellow]✗ Not available:[/yellow] blocked slots {slots}")
            raise typer.Exit(1)

        console.print(
            f"[bold green]✓ Available:[/bold green] {machine_id} on {day.date} "
            f"{run[0].start_time} – {run[-1].end_time} ({duration} min)"
        )

    except (FileNotFoundError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def dates(
    today: Annotated[Optional[str], typer.Option("--today", help="First date (YYYY-MM-DD). Defaults to today in the shop timezone.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Number of days. Defaults to days_ahead from the config.")] = None,
    config_file: ConfigOption = None,
):
    """
    List the dates open for advance booking.
    """
    try:
        config = _load_config(config_file)
        service = build_service(config)
        start = today or pendulum.now(config.timezone).to_date_string()

        for date_str in service.enumerate_available_dates(start, days):
            console.print(f"  {date_str}")

    except (FileNotFoundError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def ping(
    config_file: ConfigOption = None,
):
    """
    Test the connection to the configured reservation store.
    """
    try:
        config = _load_config(config_file)
        store = build_store(config)

        if isinstance(store, HttpReservationStore):
            info = store.ping()
            detail = f"[bold]API:[/bold] {store.base_url}\n[bold]Status:[/bold] {info.get('status', 'N/A')}"
        else:
            rows = store.load_rows()
            detail = f"[bold]File:[/bold] {store.data_file}\n[bold]Rows:[/bold] {len(rows)}"

        console.print(Panel.fit(
            f"[bold green]✓ Reservation store reachable[/bold green]\n\n{detail}",
            title="✓ Store check"
        ))

    except (FileNotFoundError, ScheduleError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]venueslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
