"""
Symptom severity classification: table-driven keyword scoring.

The score is the highest point value among all phrases found in the text, so
several mild symptoms never add up to a severe one. Phrase order in the table
does not change the result.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from .models import SeverityResult

SEVERITY_SCORES: Dict[str, int] = {
    # severe (8-10)
    "chest pain": 10,
    "heart attack": 10,
    "stroke": 10,
    "unconscious": 10,
    "severe bleeding": 10,
    "can't breathe": 10,
    "difficulty breathing": 9,
    "shortness of breath": 9,
    "loss of consciousness": 10,
    "seizure": 9,
    "paralysis": 9,
    "severe allergic": 9,
    "anaphylaxis": 10,
    # moderate (4-7)
    "high fever": 6,
    "fever": 4,
    "vomiting": 5,
    "severe headache": 6,
    "persistent pain": 5,
    "infection": 5,
    "swelling": 4,
    "dizziness": 5,
    "fainting": 7,
    "blood in urine": 6,
    "blood in stool": 7,
    "dehydration": 5,
    "migraine": 5,
    "abdominal pain": 5,
    "chest tightness": 7,
    "palpitations": 6,
    "rash": 4,
    "jaundice": 6,
    "numbness": 5,
    "vision problems": 6,
    # mild (1-3)
    "cold": 2,
    "cough": 2,
    "sore throat": 2,
    "runny nose": 1,
    "sneeze": 1,
    "mild headache": 2,
    "fatigue": 2,
    "tiredness": 2,
    "minor cut": 1,
    "bruise": 1,
    "stomach ache": 3,
    "nausea": 3,
    "back pain": 3,
}

SEVERE_THRESHOLD = 8
MODERATE_THRESHOLD = 4

SELF_CARE_TIPS: Dict[str, List[str]] = {
    "cold": ["Rest and stay hydrated", "Warm fluids like ginger tea", "OTC cold medicine if needed"],
    "cough": ["Honey and warm water", "Steam inhalation", "Rest your voice"],
    "headache": ["Drink water", "Rest in a quiet dark room", "OTC pain reliever if needed"],
    "fatigue": ["Get 7-8 hours of sleep", "Light exercise", "Balanced nutrition"],
}
DEFAULT_TIPS = [
    "Rest and stay hydrated",
    "Monitor your symptoms closely",
    "Seek medical advice if symptoms worsen",
]
MAX_TIPS = 5

_SEPARATORS = re.compile(r"[\s,]+")


def normalize(text: str) -> str:
    """Lower-case, fold curly apostrophes and collapse whitespace/commas to single spaces."""
    text = text.lower().replace("’", "'")
    return " ".join(token for token in _SEPARATORS.split(text) if token)


def score_text(text: str) -> int:
    normalized = normalize(text)
    score = 0
    for phrase, points in SEVERITY_SCORES.items():
        if phrase in normalized:
            score = max(score, points)
    return score


def classify(text: str) -> SeverityResult:
    score = score_text(text)
    if score >= SEVERE_THRESHOLD:
        return SeverityResult(
            level="severe",
            score=score,
            action="emergency",
            message="Emergency detected. Please seek immediate medical attention or call emergency services.",
        )
    if score >= MODERATE_THRESHOLD:
        return SeverityResult(
            level="moderate",
            score=score,
            action="book_appointment",
            message="Your symptoms suggest you should consult a doctor.",
        )
    return SeverityResult(
        level="mild",
        score=score,
        action="self_care",
        message="Your symptoms appear mild. Self-care should help you feel better.",
    )


def classify_symptoms(symptoms: Iterable[str]) -> SeverityResult:
    return classify(" ".join(symptoms))


def self_care_tips(text: str) -> List[str]:
    normalized = normalize(text)
    tips: List[str] = []
    for key, key_tips in SELF_CARE_TIPS.items():
        if key in normalized:
            tips.extend(key_tips)
    if not tips:
        tips = list(DEFAULT_TIPS)
    # dict.fromkeys keeps first-seen order while dropping repeats
    return list(dict.fromkeys(tips))[:MAX_TIPS]
