"""Tests for keyword severity scoring and red-flag detection."""

import pytest

from carequeue import scheduling, severity
from carequeue.red_flags import check_red_flags, is_emergency
from carequeue.scheduling import triage
from carequeue.severity import classify, classify_symptoms, self_care_tips


def test_chest_pain_is_severe():
    result = classify("I have chest pain")
    assert result.score == 10
    assert result.level == "severe"
    assert result.action == "emergency"


def test_mild_symptoms_take_max_not_sum():
    result = classify("mild headache and a cold")
    assert result.score == 2
    assert result.level == "mild"
    assert result.action == "self_care"


def test_high_fever_and_vomiting_is_moderate():
    result = classify("high fever and vomiting")
    assert result.score == 6
    assert result.level == "moderate"
    assert result.action == "book_appointment"


@pytest.mark.parametrize("text", ["", "   ", "feeling a bit off today"])
def test_no_match_scores_zero(text):
    result = classify(text)
    assert result.score == 0
    assert (result.level, result.action) == ("mild", "self_care")


def test_threshold_boundaries():
    assert classify("swelling").level == "moderate"  # 4
    assert classify("nausea").level == "mild"  # 3
    assert classify("chest tightness").level == "moderate"  # 7
    assert classify("seizure").level == "severe"  # 9


def test_commas_and_case_are_ignored():
    assert classify("FEVER,Vomiting").score == 5
    assert classify("Shortness   of\nbreath").score == 9


def test_curly_apostrophe_matches():
    assert classify("I can’t breathe").score == 10


def test_phrase_order_does_not_change_score(monkeypatch):
    text = "fever, rash, high fever, cough"
    expected = classify(text)
    reversed_table = dict(reversed(list(severity.SEVERITY_SCORES.items())))
    monkeypatch.setattr(severity, "SEVERITY_SCORES", reversed_table)
    assert classify(text) == expected


def test_classify_symptom_list():
    assert classify_symptoms(["cough", "high fever"]).score == 6


def test_self_care_tips_deduplicated_and_capped():
    tips = self_care_tips("cold and cough and fatigue")
    assert len(tips) == 5
    assert len(set(tips)) == len(tips)
    assert tips[0] == "Rest and stay hydrated"


def test_self_care_tips_default_when_nothing_matches():
    assert self_care_tips("sprained ankle") == [
        "Rest and stay hydrated",
        "Monitor your symptoms closely",
        "Seek medical advice if symptoms worsen",
    ]


def test_red_flag_detection():
    result = check_red_flags("Help, my father is UNCONSCIOUS")
    assert result.triggered
    assert result.matched_flag == "unconscious"
    assert "emergency services" in result.emergency_message
    assert result.ambulance_number


def test_red_flag_absent():
    result = check_red_flags("runny nose")
    assert not result.triggered
    assert result.matched_flag is None
    assert not is_emergency("runny nose")


def test_red_flag_overrides_severity_and_runs_first(monkeypatch):
    def fail(_text):
        raise AssertionError("severity must not run after a red flag")

    monkeypatch.setattr(scheduling, "classify", fail)
    outcome = triage("just a mild cold but I can't breathe")
    assert outcome.is_emergency
    assert outcome.severity is None
    assert outcome.red_flag.matched_flag == "can't breathe"


def test_red_flag_only_phrase_still_triggers_emergency():
    # "choking" is a red flag but not in the severity table
    assert classify("choking").score == 0
    outcome = triage("my child is choking")
    assert outcome.action == "emergency"
    assert outcome.score == 10


def test_triage_without_red_flag_uses_severity():
    outcome = triage("high fever and vomiting")
    assert not outcome.red_flag.triggered
    assert outcome.severity.score == 6
    assert outcome.action == "book_appointment"
