"""
Booking flow: triage symptoms, then book the slot or queue the request.

Red-flag detection always runs first; when it fires the severity classifier is
skipped and nothing is booked.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from .capacity import CapacityLedger
from .config import SchedulerConfig
from .forecasting import LoadForecaster
from .models import BookingOutcome, LoadPrediction, TriageOutcome, WaitlistEntry
from .red_flags import check_red_flags
from .severity import classify
from .storage import Clock, KeyValueStore, new_id
from .validators import require_date, require_text
from .waitlist import WaitlistManager

logger = logging.getLogger(__name__)


def triage(symptoms: str) -> TriageOutcome:
    red_flag = check_red_flags(symptoms)
    if red_flag.triggered:
        logger.warning("Red flag %r detected; routing to emergency", red_flag.matched_flag)
        return TriageOutcome(red_flag=red_flag, severity=None, action="emergency")
    severity = classify(symptoms)
    return TriageOutcome(red_flag=red_flag, severity=severity, action=severity.action)


class BookingService:
    def __init__(
        self,
        store: KeyValueStore,
        cfg: Optional[SchedulerConfig] = None,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self.cfg = cfg or SchedulerConfig()
        self.clock = clock or Clock()
        self.ledger = CapacityLedger(store, self.cfg)
        self.waitlist = WaitlistManager(store, self.clock, id_factory)
        self.forecaster = LoadForecaster(self.ledger, self.clock)

    def triage(self, symptoms: str) -> TriageOutcome:
        return triage(symptoms)

    def request_appointment(
        self, patient_name: str, specialty: str, day: date, symptoms: str = ""
    ) -> BookingOutcome:
        patient_name = require_text(patient_name, "patient_name")
        specialty = require_text(specialty, "specialty")
        day = require_date(day)

        outcome = triage(symptoms)
        if outcome.is_emergency:
            return BookingOutcome(
                status="emergency",
                specialty=specialty,
                date=day,
                triage=outcome,
                availability=self.ledger.get_availability(specialty, day),
            )

        if self.ledger.can_book(specialty, day):
            self.ledger.increment(specialty, day)
            logger.info("Booked %s with %s on %s", patient_name, specialty, day)
            return BookingOutcome(
                status="booked",
                specialty=specialty,
                date=day,
                triage=outcome,
                availability=self.ledger.get_availability(specialty, day),
            )

        # waitlist priority needs at least 1 even when no symptom matched
        entry = self.waitlist.add(patient_name, specialty, day, max(1, outcome.score))
        return BookingOutcome(
            status="waitlisted",
            specialty=specialty,
            date=day,
            triage=outcome,
            availability=self.ledger.get_availability(specialty, day),
            waitlist_entry=entry,
            waitlist_position=self.waitlist.position(entry.id),
            next_available=self.ledger.next_available_date(specialty, day),
        )

    def cancel(self, specialty: str, day: date, rebook_waitlisted: bool = True) -> Optional[WaitlistEntry]:
        """Release one booking and hand the slot to the next waiting patient, if any.

        Nobody is promoted unless the release actually happened and left the day
        under its normal limit.
        """
        before = self.ledger.get_capacity(specialty, day).booked
        released = self.ledger.decrement(specialty, day).booked < before
        if not released or not self.ledger.can_book(specialty, day):
            return None
        promoted = self.waitlist.promote(specialty, day)
        if promoted is not None and rebook_waitlisted:
            self.ledger.increment(promoted.specialty, promoted.preferred_date)
        return promoted

    def forecast(self, days_ahead: Optional[int] = None) -> List[LoadPrediction]:
        return self.forecaster.predict(self.cfg.forecast_days if days_ahead is None else days_ahead)
