"""
Near-term patient load forecast.

A coarse heuristic for the staffing display, not a statistical model: each day
gets twice its weekly-pattern weight plus whatever is already booked across all
specialties. Results are recomputed on every call.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence

import pandas as pd

from .capacity import CapacityLedger
from .config import LOW_RISK, RISK_THRESHOLDS, WEEKLY_PATTERN
from .models import LoadPrediction
from .storage import Clock
from .validators import require_positive


def day_of_week(day: date) -> int:
    """0=Sunday ... 6=Saturday."""
    return day.isoweekday() % 7


def risk_tier(expected: int) -> str:
    for threshold, tier in RISK_THRESHOLDS:
        if expected >= threshold:
            return tier
    return LOW_RISK


class LoadForecaster:
    def __init__(self, ledger: CapacityLedger, clock: Optional[Clock] = None):
        self.ledger = ledger
        self.clock = clock or Clock()

    def expected_for(self, day: date) -> int:
        return WEEKLY_PATTERN[day_of_week(day)] * 2 + self.ledger.booked_on(day)

    def predict(self, days_ahead: int = 14) -> List[LoadPrediction]:
        require_positive(days_ahead, "days_ahead")
        today = self.clock.today()
        predictions: List[LoadPrediction] = []
        for offset in range(days_ahead):
            day = today + timedelta(days=offset)
            expected = self.expected_for(day)
            predictions.append(LoadPrediction(date=day, expected=expected, risk=risk_tier(expected)))
        return predictions


def to_frame(predictions: Sequence[LoadPrediction]) -> pd.DataFrame:
    records = [
        {
            "date": p.date,
            "day": p.date.strftime("%a"),
            "expected": p.expected,
            "risk": p.risk,
        }
        for p in predictions
    ]
    return pd.DataFrame.from_records(records, columns=["date", "day", "expected", "risk"])
