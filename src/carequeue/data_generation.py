"""
Synthetic bookings for demos: weekly seasonality with Poisson noise.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

import numpy as np

from .capacity import CapacityLedger
from .config import SPECIALTIES, WEEKLY_PATTERN
from .forecasting import day_of_week


def expected_daily_bookings(day: date, per_specialty_scale: float) -> float:
    # weekly pattern peaks at 9, so scale=1.0 means ~9 bookings on a Monday
    return WEEKLY_PATTERN[day_of_week(day)] * per_specialty_scale


def seed_bookings(
    ledger: CapacityLedger,
    start: date,
    days: int = 14,
    specialties: Optional[Sequence[str]] = None,
    scale: float = 1.0,
    seed: int = 42,
    respect_capacity: bool = True,
) -> Dict[str, int]:
    """Book a random number of appointments per specialty per day.

    Returns the number of bookings made per specialty.
    """
    rng = np.random.default_rng(seed)
    chosen: List[str] = list(SPECIALTIES if specialties is None else specialties)
    made: Dict[str, int] = {s: 0 for s in chosen}
    for offset in range(days):
        day = start + timedelta(days=offset)
        lam = expected_daily_bookings(day, scale)
        for specialty in chosen:
            count = int(rng.poisson(lam))
            for _ in range(count):
                if respect_capacity and not ledger.can_book(specialty, day):
                    break
                ledger.increment(specialty, day)
                made[specialty] += 1
    return made
