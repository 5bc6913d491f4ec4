"""
Waitlist of deferred booking requests, ordered by severity then arrival.

Entries are matched to a (specialty, day) slot by value only; the capacity
ledger knows nothing about them. Duplicate requests are kept as-is.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from .config import WAITLIST_KEY
from .models import WaitlistEntry
from .storage import Clock, KeyValueStore, load_table, new_id, save_table
from .validators import require_date, require_severity, require_text

logger = logging.getLogger(__name__)


def _priority(entry: WaitlistEntry):
    return (-entry.severity_score, entry.created_at)


class WaitlistManager:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self.store = store
        self.clock = clock or Clock()
        self.id_factory = id_factory

    def _load(self) -> List[WaitlistEntry]:
        return load_table(self.store, WAITLIST_KEY, WaitlistEntry.from_dict)

    def _save(self, entries: List[WaitlistEntry]) -> None:
        save_table(self.store, WAITLIST_KEY, entries)

    def add(self, patient_name: str, specialty: str, day: date, severity_score: int) -> WaitlistEntry:
        entry = WaitlistEntry(
            id=self.id_factory(),
            patient_name=require_text(patient_name, "patient_name"),
            specialty=require_text(specialty, "specialty"),
            preferred_date=require_date(day, "preferred_date"),
            severity_score=require_severity(severity_score),
            created_at=self.clock.now(),
        )
        entries = self._load()
        entries.append(entry)
        self._save(entries)
        logger.info(
            "Waitlisted %s for %s on %s (severity %d)",
            entry.patient_name, entry.specialty, entry.preferred_date, entry.severity_score,
        )
        return entry

    def list(self) -> List[WaitlistEntry]:
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(self._load(), key=_priority)

    def get(self, entry_id: str) -> Optional[WaitlistEntry]:
        return next((e for e in self._load() if e.id == entry_id), None)

    def for_slot(self, specialty: str, day: date) -> List[WaitlistEntry]:
        day = require_date(day)
        specialty = require_text(specialty, "specialty")
        return [e for e in self.list() if e.specialty == specialty and e.preferred_date == day]

    def remove(self, entry_id: str) -> None:
        entries = self._load()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) != len(entries):
            self._save(kept)

    def promote(self, specialty: str, day: date) -> Optional[WaitlistEntry]:
        """Take the highest-priority entry waiting on the slot, marked notified.

        Does not touch the capacity ledger.
        """
        candidates = self.for_slot(specialty, day)
        if not candidates:
            return None
        chosen = candidates[0]
        self.remove(chosen.id)
        logger.info("Promoted %s from waitlist for %s on %s", chosen.patient_name, specialty, chosen.preferred_date)
        return chosen.mark_notified()

    def position(self, entry_id: str) -> int:
        for rank, entry in enumerate(self.list(), start=1):
            if entry.id == entry_id:
                return rank
        return 0
