"""
Centralized scheduler defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .errors import ValidationError


SPECIALTIES: List[str] = [
    "General Physician",
    "Cardiologist",
    "Dermatologist",
    "Pediatrician",
    "Orthopedic",
    "Neurologist",
]

# Relative daily demand indexed by day of week, 0=Sunday.
# Monday/Tuesday peak, Wednesday normal, Thursday/Friday moderate, weekends low.
WEEKLY_PATTERN: Tuple[int, ...] = (3, 9, 7, 4, 6, 5, 2)

# Checked top-down; first threshold the expected count reaches wins.
RISK_THRESHOLDS: List[Tuple[int, str]] = [(18, "critical"), (14, "high"), (8, "normal")]
LOW_RISK = "low"

CAPACITY_KEY = "carequeue.capacity"
WAITLIST_KEY = "carequeue.waitlist"


def validate_limits(max_per_day: int, emergency_buffer: int) -> None:
    if max_per_day <= 0:
        raise ValidationError(f"max_per_day must be positive, got {max_per_day}")
    if not 0 <= emergency_buffer < max_per_day:
        raise ValidationError(
            f"emergency_buffer must be in [0, {max_per_day}), got {emergency_buffer}"
        )


@dataclass
class SchedulerConfig:
    max_per_day: int = 20
    emergency_buffer: int = 3  # slots withheld for same-day emergencies
    horizon_days: int = 14  # how far next_available_date looks ahead
    forecast_days: int = 14
    patients_per_doctor: int = 20
    teleconsult_share: float = 0.3
    specialty_limits: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_limits(self.max_per_day, self.emergency_buffer)
        for max_per_day, buffer in self.specialty_limits.values():
            validate_limits(max_per_day, buffer)
        if self.horizon_days <= 0:
            raise ValidationError("horizon_days must be positive")
        if self.forecast_days <= 0:
            raise ValidationError("forecast_days must be positive")
        if self.patients_per_doctor <= 0:
            raise ValidationError("patients_per_doctor must be positive")
        if not 0 <= self.teleconsult_share <= 1:
            raise ValidationError(f"teleconsult_share must be in [0, 1], got {self.teleconsult_share}")

    def limits_for(self, specialty: str) -> Tuple[int, int]:
        return self.specialty_limits.get(specialty, (self.max_per_day, self.emergency_buffer))
