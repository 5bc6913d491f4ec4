"""
Red-flag emergency detection.

Runs before severity classification on every piece of symptom text. Its phrase
list is maintained separately from the severity table.
"""

from __future__ import annotations

from typing import List

from .models import RedFlagResult
from .severity import normalize

RED_FLAGS: List[str] = [
    "chest pain",
    "heart attack",
    "difficulty breathing",
    "can't breathe",
    "shortness of breath",
    "stroke symptoms",
    "loss of consciousness",
    "severe bleeding",
    "signs of heart attack",
    "unconscious",
    "seizure",
    "anaphylaxis",
    "severe allergic reaction",
    "paralysis",
    "not breathing",
    "choking",
    "overdose",
    "poisoning",
    "severe burns",
    "deep wound",
]

NEARBY_ER = "Find the nearest emergency room: google.com/maps/search/emergency+room+near+me"
AMBULANCE_NUMBER = "112 (India) / 911 (US)"


def check_red_flags(text: str) -> RedFlagResult:
    normalized = normalize(text)
    for flag in RED_FLAGS:
        if flag in normalized:
            return RedFlagResult(
                triggered=True,
                matched_flag=flag,
                emergency_message=(
                    f'Emergency: "{flag}" detected. Do NOT delay, call emergency services immediately.'
                ),
                nearby_er=NEARBY_ER,
                ambulance_number=AMBULANCE_NUMBER,
            )
    return RedFlagResult(triggered=False)


def is_emergency(text: str) -> bool:
    return check_red_flags(text).triggered
