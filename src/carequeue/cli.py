from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import SchedulerConfig
from .data_generation import seed_bookings
from .errors import ValidationError
from .forecasting import to_frame
from .scheduling import BookingService, triage
from .severity import self_care_tips
from .staffing import StaffingAdvisor
from .storage import JsonFileStore
from .visualize import plot_forecast

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)

DATE_FORMATS = ["%Y-%m-%d"]


def _service(ctx: typer.Context) -> BookingService:
    return ctx.obj["service"]


def _day(service: BookingService, value: Optional[datetime]) -> date:
    return value.date() if value else service.clock.today()


@contextmanager
def _rejecting_invalid():
    try:
        yield
    except ValidationError as exc:
        console.print(f"[red]Invalid request:[/] {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    store: Path = typer.Option(
        Path("carequeue.json"), envvar="CAREQUEUE_STORE", help="JSON file holding ledger and waitlist."
    ),
    max_per_day: int = typer.Option(20, help="Default daily capacity per specialty."),
    emergency_buffer: int = typer.Option(3, help="Slots held back for emergencies."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    try:
        cfg = SchedulerConfig(max_per_day=max_per_day, emergency_buffer=emergency_buffer)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    ctx.obj = {"service": BookingService(JsonFileStore(store), cfg)}


@app.command("triage")
def triage_cmd(symptoms: str = typer.Argument(..., help="Free-text symptom description.")) -> None:
    outcome = triage(symptoms)
    if outcome.severity is None:
        console.print(f"[bold red]{outcome.red_flag.emergency_message}[/]")
        console.print(outcome.red_flag.nearby_er)
        console.print(f"Ambulance: {outcome.red_flag.ambulance_number}")
        return
    sev = outcome.severity
    console.print(f"Severity: {sev.level} (score {sev.score}) -> {sev.action}")
    console.print(sev.message)
    if sev.action == "self_care":
        for tip in self_care_tips(symptoms):
            console.print(f"  - {tip}")


@app.command("book")
def book(
    ctx: typer.Context,
    patient: str = typer.Argument(..., help="Patient name."),
    specialty: str = typer.Argument(..., help="Doctor specialty, e.g. Cardiologist."),
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="Defaults to today."),
    symptoms: str = typer.Option("", help="Symptoms used for triage and waitlist priority."),
) -> None:
    service = _service(ctx)
    with _rejecting_invalid():
        outcome = service.request_appointment(patient, specialty, _day(service, on), symptoms)
    if outcome.status == "emergency":
        sev = outcome.triage.severity
        console.print(f"[bold red]{outcome.triage.red_flag.emergency_message or sev.message}[/]")
        raise typer.Exit(code=2)
    if outcome.status == "booked":
        console.print(
            f"booked: {patient} with {specialty} on {outcome.date} "
            f"({outcome.availability.available} slots left)"
        )
        return
    console.print(f"waitlisted: {patient} is #{outcome.waitlist_position} for {specialty} on {outcome.date}")
    if outcome.next_available:
        console.print(f"Next available date: {outcome.next_available}")
    else:
        console.print(f"No availability in the next {service.cfg.horizon_days} days.")


@app.command("cancel")
def cancel(
    ctx: typer.Context,
    specialty: str = typer.Argument(...),
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS),
    rebook: bool = typer.Option(True, help="Book the promoted waitlist entry into the freed slot."),
) -> None:
    service = _service(ctx)
    with _rejecting_invalid():
        promoted = service.cancel(specialty, _day(service, on), rebook_waitlisted=rebook)
    if promoted:
        console.print(f"Slot offered to {promoted.patient_name} (severity {promoted.severity_score}).")
    else:
        console.print("No waitlisted patient promoted.")


@app.command("availability")
def availability(
    ctx: typer.Context,
    specialty: str = typer.Argument(...),
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS),
) -> None:
    service = _service(ctx)
    day = _day(service, on)
    with _rejecting_invalid():
        info = service.ledger.get_availability(specialty, day)
        nxt = service.ledger.next_available_date(specialty, day) if info.is_full else None
    console.print(f"{specialty} on {day}: {info.booked} booked, {info.available} available")
    if info.is_full:
        console.print(f"Full. Next available: {nxt or 'none within horizon'}")


@app.command("waitlist")
def waitlist(ctx: typer.Context) -> None:
    entries = _service(ctx).waitlist.list()
    table = Table(title="Waitlist", show_header=True, header_style="bold magenta")
    for col in ("#", "Patient", "Specialty", "Date", "Severity", "Since"):
        table.add_column(col)
    for rank, e in enumerate(entries, start=1):
        table.add_row(
            str(rank), e.patient_name, e.specialty, e.preferred_date.isoformat(),
            str(e.severity_score), f"{e.created_at:%Y-%m-%d %H:%M}",
        )
    console.print(table)


@app.command("forecast")
def forecast(
    ctx: typer.Context,
    days: int = typer.Option(14, help="Days ahead to forecast, starting today."),
    csv_out: Optional[Path] = typer.Option(None, help="Path to save the forecast table."),
    png_out: Optional[Path] = typer.Option(None, help="Path to save a chart instead of showing it."),
    plot: bool = typer.Option(False, help="Show matplotlib chart."),
) -> None:
    service = _service(ctx)
    with _rejecting_invalid():
        predictions = service.forecast(days)
    advisor = StaffingAdvisor(service.cfg)
    _print_forecast(predictions, advisor)

    if csv_out:
        to_frame(predictions).to_csv(csv_out, index=False)
        console.log(f"Saved forecast to {csv_out}")

    if plot or png_out:
        plot_forecast(predictions, outfile=png_out)


def _print_forecast(predictions, advisor: StaffingAdvisor) -> None:
    table = Table(title="Patient load forecast", show_header=True, header_style="bold magenta")
    for col in ("Date", "Day", "Expected", "Risk", "Doctors", "Teleconsult"):
        table.add_column(col)
    for p in predictions:
        table.add_row(
            p.date.isoformat(), f"{p.date:%a}", str(p.expected), p.risk,
            str(advisor.doctors_for(p.expected)), str(advisor.teleconsult_slots(p.expected)),
        )
    console.print(table)

    summary = advisor.summarize(predictions)
    console.print(
        f"Avg patients/day: {summary.average_per_day}  "
        f"High-risk days: {summary.high_risk_days}  "
        f"Recommended doctors: {summary.recommended_doctors}"
    )
    if summary.busiest:
        console.print(f"Busiest day: {summary.busiest.date} with ~{summary.busiest.expected} patients")


@app.command("seed")
def seed(
    ctx: typer.Context,
    days: int = typer.Option(14, help="Days to fill, starting today."),
    scale: float = typer.Option(1.0, help="Multiplier on the weekly demand pattern."),
    seed: int = typer.Option(42, help="Random seed."),
) -> None:
    service = _service(ctx)
    with _rejecting_invalid():
        made = seed_bookings(service.ledger, service.clock.today(), days=days, scale=scale, seed=seed)
    console.log(f"Seeded {sum(made.values())} bookings across {len(made)} specialties")
