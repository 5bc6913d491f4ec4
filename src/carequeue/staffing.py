"""
Staffing recommendations derived from the load forecast.
"""

from __future__ import annotations

from math import ceil
from typing import List, Optional, Sequence

from .config import LOW_RISK, SchedulerConfig
from .models import LoadPrediction, LoadSummary, StaffingRecommendation

ELEVATED_RISKS = ("high", "critical")


class StaffingAdvisor:
    def __init__(self, cfg: Optional[SchedulerConfig] = None):
        self.cfg = cfg or SchedulerConfig()

    def doctors_for(self, expected: int) -> int:
        return ceil(expected / self.cfg.patients_per_doctor)

    def teleconsult_slots(self, expected: int) -> int:
        return round(expected * self.cfg.teleconsult_share)

    def recommend(
        self, predictions: Sequence[LoadPrediction], limit: Optional[int] = None
    ) -> List[StaffingRecommendation]:
        """One recommendation per day that is not low risk, in date order."""
        recs = [
            StaffingRecommendation(
                date=p.date,
                expected=p.expected,
                risk=p.risk,
                recommended_doctors=self.doctors_for(p.expected),
                teleconsult_slots=self.teleconsult_slots(p.expected),
            )
            for p in predictions
            if p.risk != LOW_RISK
        ]
        return recs if limit is None else recs[:limit]

    def summarize(self, predictions: Sequence[LoadPrediction]) -> LoadSummary:
        if not predictions:
            return LoadSummary(average_per_day=0, high_risk_days=0, busiest=None, recommended_doctors=0)
        average = round(sum(p.expected for p in predictions) / len(predictions))
        # max() keeps the first of equal maxima, i.e. the earliest busiest day
        busiest = max(predictions, key=lambda p: p.expected)
        return LoadSummary(
            average_per_day=average,
            high_risk_days=sum(1 for p in predictions if p.risk in ELEVATED_RISKS),
            busiest=busiest,
            recommended_doctors=self.doctors_for(average),
        )
