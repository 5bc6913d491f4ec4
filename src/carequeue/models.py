"""
Typed containers used throughout the scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Optional


@dataclass
class CapacityRecord:
    specialty: str
    date: date
    max_per_day: int
    emergency_buffer: int
    booked: int = 0

    @property
    def bookable(self) -> int:
        """Slots open to normal bookings once the emergency buffer is withheld."""
        return self.max_per_day - self.emergency_buffer

    def to_dict(self) -> Dict[str, Any]:
        return {
            "specialty": self.specialty,
            "date": self.date.isoformat(),
            "max_per_day": self.max_per_day,
            "emergency_buffer": self.emergency_buffer,
            "booked": self.booked,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CapacityRecord":
        return cls(
            specialty=str(data["specialty"]),
            date=date.fromisoformat(data["date"]),
            max_per_day=int(data["max_per_day"]),
            emergency_buffer=int(data["emergency_buffer"]),
            booked=int(data["booked"]),
        )


@dataclass(frozen=True)
class Availability:
    booked: int
    available: int
    is_full: bool


@dataclass
class WaitlistEntry:
    id: str
    patient_name: str
    specialty: str
    preferred_date: date
    severity_score: int  # 1-10
    created_at: datetime
    notified: bool = False

    def mark_notified(self) -> "WaitlistEntry":
        return replace(self, notified=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patient_name": self.patient_name,
            "specialty": self.specialty,
            "preferred_date": self.preferred_date.isoformat(),
            "severity_score": self.severity_score,
            "created_at": self.created_at.isoformat(),
            "notified": self.notified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WaitlistEntry":
        return cls(
            id=str(data["id"]),
            patient_name=str(data["patient_name"]),
            specialty=str(data["specialty"]),
            preferred_date=date.fromisoformat(data["preferred_date"]),
            severity_score=int(data["severity_score"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            notified=bool(data.get("notified", False)),
        )


@dataclass(frozen=True)
class SeverityResult:
    level: str  # mild / moderate / severe
    score: int
    action: str  # self_care / book_appointment / emergency
    message: str = ""


@dataclass(frozen=True)
class RedFlagResult:
    triggered: bool
    matched_flag: Optional[str] = None
    emergency_message: str = ""
    nearby_er: str = ""
    ambulance_number: str = ""


@dataclass(frozen=True)
class LoadPrediction:
    date: date
    expected: int
    risk: str  # low / normal / high / critical


@dataclass(frozen=True)
class StaffingRecommendation:
    date: date
    expected: int
    risk: str
    recommended_doctors: int
    teleconsult_slots: int


@dataclass(frozen=True)
class LoadSummary:
    average_per_day: int
    high_risk_days: int
    busiest: Optional[LoadPrediction]
    recommended_doctors: int


@dataclass(frozen=True)
class TriageOutcome:
    red_flag: RedFlagResult
    severity: Optional[SeverityResult]  # None when a red flag short-circuited
    action: str

    @property
    def is_emergency(self) -> bool:
        return self.action == "emergency"

    @property
    def score(self) -> int:
        if self.severity is None:
            return 10
        return self.severity.score


@dataclass
class BookingOutcome:
    status: str  # booked / waitlisted / emergency
    specialty: str
    date: date
    triage: TriageOutcome
    availability: Availability
    waitlist_entry: Optional[WaitlistEntry] = None
    waitlist_position: int = 0
    next_available: Optional[date] = None
