"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import AppConfig, load_config
from ..adapters.reservation_file import InMemoryReservationSource, ReservationFileSource
from ..domain.date_arithmetic import prettify_duration
from ..domain.exceptions import SlotGridError
from ..domain.models import Slot
from ..services.slot_service import SlotService

app = typer.Typer(
    name="slotgrid",
    help="Split time ranges into reservation slots",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    slotgrid - reservation slot engine.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def _load(config_file: Optional[Path], timezone: Optional[str]) -> AppConfig:
    config = load_config(config_file)
    if timezone:
        config = AppConfig(**{**config.model_dump(), "timezone": timezone})
    return config


def _fail(message: object) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    raise typer.Exit(1)


def _state_label(slot: Slot) -> str:
    if slot.editing:
        return "[cyan]editing[/cyan]"
    if slot.reserved:
        return "[red]reserved[/red]"
    return "[green]free[/green]"


def _run_label(slot: Slot) -> str:
    markers: List[str] = []
    if slot.reservation_starting:
        markers.append("start")
    if slot.reservation_ending:
        markers.append("end")
    return ", ".join(markers)


def _render_table(slots: List[Slot], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold yellow")
    table.add_column("State")
    table.add_column("Run", style="dim")
    table.add_column("UTC", style="dim")

    for slot in slots:
        table.add_row(slot.as_string, _state_label(slot), _run_label(slot), slot.as_iso_string)
    return table


@app.command()
def slots(
    date: Annotated[Optional[str], typer.Option("--date", help="Day to split using the opening hours. Defaults to today.")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Range start as ISO-8601 instant")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Range end as ISO-8601 instant")] = None,
    opens: Annotated[Optional[str], typer.Option("--opens", help="Opening time (HH:mm) used with --date")] = None,
    closes: Annotated[Optional[str], typer.Option("--closes", help="Closing time (HH:mm) used with --date")] = None,
    period: Annotated[Optional[str], typer.Option("--period", "-p", help="Slot length (HH:MM:SS)")] = None,
    reservations: Annotated[Optional[Path], typer.Option("--reservations", "-r", help="YAML/JSON file with reservations")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots as JSON.")] = False,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "--tz", help="Display timezone")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Split a time range into slots and mark reservations.

    Examples:

        # Today's opening hours from config.yaml
        slotgrid slots

        # Explicit range with a reservation file
        slotgrid slots --start 2015-10-09T08:00:00+03:00 --end 2015-10-09T10:00:00+03:00 -r reservations.yaml

        # One day, 15 minute slots, JSON output
        slotgrid slots --date 2015-10-09 --opens 08:00 --closes 12:00 -p 00:15:00 --json
    """
    try:
        config = _load(config_file, timezone)

        if bool(start) != bool(end):
            _fail("--start and --end must be given together.")

        reservation_path = reservations or config.reservations_file
        if reservation_path:
            source = ReservationFileSource(reservation_path)
        else:
            source = InMemoryReservationSource()

        service = SlotService(
            reservation_source=source,
            slot_engine=config.build_engine(),
            date_arithmetic=config.build_date_arithmetic(),
        )

        if start and end:
            result = service.find_slots(range_start=start, range_end=end, period=period)
            title = f"Slots {start} - {end}"
        else:
            result = service.slots_for_date(
                date_string=date,
                opens=opens or config.defaults.opens,
                closes=closes or config.defaults.closes,
                period=period,
            )
            title = f"Slots {config.build_date_arithmetic().current_or_given_date_string(date)}"

        if as_json:
            typer.echo(json.dumps([slot.to_dict() for slot in result], ensure_ascii=False, indent=2))
            return

        if not result:
            console.print("[yellow]No slots in the requested range.[/yellow]")
            return

        console.print()
        console.print(_render_table(result, title))
        console.print()

    except (SlotGridError, FileNotFoundError, ValueError) as e:
        logger.debug("slots command failed", exc_info=True)
        _fail(e)


@app.command("add-days", context_settings={"ignore_unknown_options": True})
def add_days(
    date: Annotated[str, typer.Argument(help="Calendar date")],
    days: Annotated[int, typer.Argument(help="Days to add, negative to subtract")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Shift a date by a number of days.
    """
    try:
        arithmetic = _load(config_file, None).build_date_arithmetic()
        typer.echo(arithmetic.add_days(date, days))
    except (SlotGridError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command("day-bounds")
def day_bounds(
    date: Annotated[Optional[str], typer.Argument(help="Calendar date. Defaults to today.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Show the UTC start and end instants of a date.
    """
    try:
        arithmetic = _load(config_file, None).build_date_arithmetic()
        bounds = arithmetic.day_bounds(arithmetic.current_or_given_date_string(date))
        typer.echo(f"{bounds['start']} {bounds['end']}")
    except (SlotGridError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def duration(
    hours: Annotated[float, typer.Argument(help="Duration in hours")],
    minutes: Annotated[bool, typer.Option("--minutes", "-m", help="Show short durations in minutes.")] = False,
):
    """
    Format a duration given in hours.
    """
    typer.echo(prettify_duration(hours, minutes))


@app.command("is-past")
def is_past(
    date: Annotated[str, typer.Argument(help="Calendar date")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Tell whether a date is before today.
    """
    try:
        arithmetic = _load(config_file, None).build_date_arithmetic()
        past = arithmetic.is_past_date(date)
    except (SlotGridError, FileNotFoundError, ValueError) as e:
        _fail(e)

    typer.echo("yes" if past else "no")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotgrid[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
