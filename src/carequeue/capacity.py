"""
Capacity ledger: per (specialty, day) booking counters against a daily maximum
with an emergency buffer held back from normal bookings.

Reads never write. A pair with no stored record reads as a zero-booked record
carrying the configured limits; only increment, decrement and set_limits
persist anything.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .config import CAPACITY_KEY, SchedulerConfig, validate_limits
from .models import Availability, CapacityRecord
from .storage import KeyValueStore, load_table, save_table
from .validators import require_date, require_positive, require_text

logger = logging.getLogger(__name__)

Key = Tuple[str, date]


class CapacityLedger:
    def __init__(self, store: KeyValueStore, cfg: Optional[SchedulerConfig] = None):
        self.store = store
        self.cfg = cfg or SchedulerConfig()

    def _load(self) -> Dict[Key, CapacityRecord]:
        rows = load_table(self.store, CAPACITY_KEY, CapacityRecord.from_dict)
        return {(r.specialty, r.date): r for r in rows}

    def _save(self, records: Dict[Key, CapacityRecord]) -> None:
        save_table(self.store, CAPACITY_KEY, list(records.values()))

    def _default(self, specialty: str, day: date) -> CapacityRecord:
        max_per_day, buffer = self.cfg.limits_for(specialty)
        return CapacityRecord(specialty, day, max_per_day, buffer, booked=0)

    def _key(self, specialty: Any, day: Any) -> Key:
        return require_text(specialty, "specialty"), require_date(day)

    def get_capacity(self, specialty: str, day: date) -> CapacityRecord:
        key = self._key(specialty, day)
        return self._load().get(key) or self._default(*key)

    def records(self) -> List[CapacityRecord]:
        return sorted(self._load().values(), key=lambda r: (r.date, r.specialty))

    def can_book(self, specialty: str, day: date) -> bool:
        cap = self.get_capacity(specialty, day)
        return cap.booked < cap.bookable

    def increment(self, specialty: str, day: date) -> CapacityRecord:
        # Over-capacity increments are allowed: administrative bookings may
        # exceed the normal limit. Callers check can_book for the normal flow.
        key = self._key(specialty, day)
        records = self._load()
        record = records.get(key) or self._default(*key)
        record.booked += 1
        records[key] = record
        self._save(records)
        if record.booked > record.bookable:
            logger.info(
                "Override booking for %s on %s: %d booked, limit %d",
                key[0], key[1], record.booked, record.bookable,
            )
        logger.debug("Booked %s on %s (%d/%d)", key[0], key[1], record.booked, record.bookable)
        return record

    def decrement(self, specialty: str, day: date) -> CapacityRecord:
        key = self._key(specialty, day)
        records = self._load()
        record = records.get(key)
        if record is None or record.booked == 0:
            return record or self._default(*key)
        record.booked -= 1
        self._save(records)
        logger.debug("Released %s on %s (%d/%d)", key[0], key[1], record.booked, record.bookable)
        return record

    def set_limits(
        self, specialty: str, day: date, max_per_day: int, emergency_buffer: int
    ) -> CapacityRecord:
        """Override the limits for a single day, keeping its booked count."""
        validate_limits(max_per_day, emergency_buffer)
        key = self._key(specialty, day)
        records = self._load()
        record = records.get(key) or self._default(*key)
        record.max_per_day = max_per_day
        record.emergency_buffer = emergency_buffer
        records[key] = record
        self._save(records)
        return record

    def get_availability(self, specialty: str, day: date) -> Availability:
        cap = self.get_capacity(specialty, day)
        available = max(0, cap.bookable - cap.booked)
        return Availability(booked=cap.booked, available=available, is_full=available == 0)

    def next_available_date(
        self, specialty: str, after: date, horizon_days: Optional[int] = None
    ) -> Optional[date]:
        """First day after `after` (exclusive) within the horizon that is not full.

        Returns None when every day in the horizon is full.
        """
        specialty, after = self._key(specialty, after)
        horizon = require_positive(
            self.cfg.horizon_days if horizon_days is None else horizon_days, "horizon_days"
        )
        records = self._load()
        for offset in range(1, horizon + 1):
            day = after + timedelta(days=offset)
            cap = records.get((specialty, day)) or self._default(specialty, day)
            if cap.booked < cap.bookable:
                return day
        return None

    def booked_on(self, day: date) -> int:
        """Bookings across every specialty for one day."""
        day = require_date(day)
        return sum(r.booked for r in self._load().values() if r.date == day)

    def prune_before(self, day: date) -> int:
        """Drop records for days before `day`; returns how many were removed."""
        day = require_date(day)
        records = self._load()
        kept = {k: r for k, r in records.items() if r.date >= day}
        removed = len(records) - len(kept)
        if removed:
            self._save(kept)
            logger.info("Pruned %d stale capacity records before %s", removed, day)
        return removed
