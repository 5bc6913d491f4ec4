"""Tests for the capacity ledger and availability calculations."""

from datetime import date, datetime, timedelta

import pytest

from carequeue.capacity import CapacityLedger
from carequeue.config import CAPACITY_KEY, SchedulerConfig
from carequeue.errors import ValidationError
from carequeue.storage import MemoryStore

DAY = date(2026, 10, 20)


def test_defaults_for_unseen_pair(ledger):
    cap = ledger.get_capacity("Cardiologist", DAY)
    assert (cap.max_per_day, cap.emergency_buffer, cap.booked) == (20, 3, 0)


def test_reads_do_not_write(ledger, store):
    ledger.get_capacity("Cardiologist", DAY)
    ledger.can_book("Cardiologist", DAY)
    ledger.get_availability("Cardiologist", DAY)
    ledger.next_available_date("Cardiologist", DAY)
    assert store.get(CAPACITY_KEY) is None


def test_availability_formula_holds_while_booking(ledger):
    for booked in range(0, 22):
        info = ledger.get_availability("Dermatologist", DAY)
        assert info.booked == booked
        assert info.available == max(0, 20 - 3 - booked)
        assert info.is_full == (info.available == 0)
        ledger.increment("Dermatologist", DAY)


def test_can_book_stops_at_buffer(ledger, fill):
    fill(ledger, "Cardiologist", DAY)
    cap = ledger.get_capacity("Cardiologist", DAY)
    assert cap.booked == 17
    assert not ledger.can_book("Cardiologist", DAY)


def test_increment_allows_override_past_capacity(ledger, fill):
    fill(ledger, "Cardiologist", DAY)
    for _ in range(5):
        ledger.increment("Cardiologist", DAY)
    cap = ledger.get_capacity("Cardiologist", DAY)
    assert cap.booked == 22
    assert ledger.get_availability("Cardiologist", DAY).available == 0


def test_decrement_floors_at_zero(ledger):
    ledger.decrement("Cardiologist", DAY)
    assert ledger.get_capacity("Cardiologist", DAY).booked == 0
    ledger.increment("Cardiologist", DAY)
    ledger.decrement("Cardiologist", DAY)
    ledger.decrement("Cardiologist", DAY)
    assert ledger.get_capacity("Cardiologist", DAY).booked == 0


def test_increment_then_decrement_restores_count(ledger):
    for _ in range(4):
        ledger.increment("Pediatrician", DAY)
    ledger.increment("Pediatrician", DAY)
    ledger.decrement("Pediatrician", DAY)
    assert ledger.get_capacity("Pediatrician", DAY).booked == 4


def test_specialties_and_days_are_independent(ledger):
    ledger.increment("Cardiologist", DAY)
    assert ledger.get_capacity("Neurologist", DAY).booked == 0
    assert ledger.get_capacity("Cardiologist", DAY + timedelta(days=1)).booked == 0


def test_next_available_skips_full_days(ledger, fill):
    for offset in range(1, 4):
        fill(ledger, "Cardiologist", DAY + timedelta(days=offset))
    assert ledger.next_available_date("Cardiologist", DAY) == DAY + timedelta(days=4)


def test_next_available_excludes_start_day(ledger):
    # DAY itself is open but is never returned
    assert ledger.next_available_date("Cardiologist", DAY) == DAY + timedelta(days=1)


def test_next_available_returns_none_when_horizon_full(ledger, fill):
    for offset in range(1, 4):
        fill(ledger, "Cardiologist", DAY + timedelta(days=offset))
    assert ledger.next_available_date("Cardiologist", DAY, horizon_days=3) is None


def test_next_available_rejects_bad_horizon(ledger):
    with pytest.raises(ValidationError):
        ledger.next_available_date("Cardiologist", DAY, horizon_days=0)


def test_specialty_limits_from_config():
    cfg = SchedulerConfig(specialty_limits={"Neurologist": (5, 1)})
    ledger = CapacityLedger(MemoryStore(), cfg)
    for _ in range(4):
        ledger.increment("Neurologist", DAY)
    assert not ledger.can_book("Neurologist", DAY)
    assert ledger.can_book("Cardiologist", DAY)


def test_set_limits_keeps_booked_count(ledger):
    ledger.increment("Orthopedic", DAY)
    ledger.increment("Orthopedic", DAY)
    cap = ledger.set_limits("Orthopedic", DAY, max_per_day=3, emergency_buffer=1)
    assert cap.booked == 2
    assert ledger.get_availability("Orthopedic", DAY).is_full


@pytest.mark.parametrize("max_per_day, buffer", [(0, 0), (-1, 0), (5, 5), (5, -1)])
def test_invalid_limits_rejected(ledger, max_per_day, buffer):
    with pytest.raises(ValidationError):
        ledger.set_limits("Orthopedic", DAY, max_per_day, buffer)
    with pytest.raises(ValidationError):
        SchedulerConfig(max_per_day=max_per_day, emergency_buffer=buffer)


@pytest.mark.parametrize("day", [None, "", "20-10-2026", 42])
def test_invalid_date_rejected(ledger, day):
    with pytest.raises(ValidationError):
        ledger.increment("Cardiologist", day)


def test_blank_specialty_rejected(ledger):
    with pytest.raises(ValidationError):
        ledger.can_book("  ", DAY)


def test_iso_strings_and_datetimes_accepted(ledger):
    ledger.increment("Cardiologist", "2026-10-20")
    ledger.increment("Cardiologist", datetime(2026, 10, 20, 15, 30))
    assert ledger.get_capacity("Cardiologist", DAY).booked == 2


def test_booked_on_sums_specialties(ledger):
    ledger.increment("Cardiologist", DAY)
    ledger.increment("Cardiologist", DAY)
    ledger.increment("Dermatologist", DAY)
    ledger.increment("Dermatologist", DAY + timedelta(days=1))
    assert ledger.booked_on(DAY) == 3


def test_prune_before_drops_stale_records(ledger):
    ledger.increment("Cardiologist", DAY - timedelta(days=2))
    ledger.increment("Cardiologist", DAY)
    assert ledger.prune_before(DAY) == 1
    assert [r.date for r in ledger.records()] == [DAY]
    assert ledger.prune_before(DAY) == 0


def test_state_survives_new_ledger_on_same_store(store, cfg):
    CapacityLedger(store, cfg).increment("Cardiologist", DAY)
    assert CapacityLedger(store, cfg).get_capacity("Cardiologist", DAY).booked == 1


def test_corrupt_table_treated_as_empty(store, ledger, caplog):
    store.set(CAPACITY_KEY, "{not json")
    with caplog.at_level("WARNING"):
        assert ledger.get_capacity("Cardiologist", DAY).booked == 0
    assert "malformed" in caplog.text
    ledger.increment("Cardiologist", DAY)
    assert ledger.get_capacity("Cardiologist", DAY).booked == 1
