"""
Test fixtures. Everything runs against an in-memory store and a pinned clock
so no files are touched and dates are reproducible.
"""

import itertools
from datetime import datetime

import pytest

from carequeue.capacity import CapacityLedger
from carequeue.config import SchedulerConfig
from carequeue.scheduling import BookingService
from carequeue.storage import FixedClock, MemoryStore
from carequeue.waitlist import WaitlistManager


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def clock():
    # a Monday
    return FixedClock(datetime(2026, 10, 19, 9, 0))


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"wl-{next(counter)}"


@pytest.fixture()
def cfg():
    return SchedulerConfig()


@pytest.fixture()
def ledger(store, cfg):
    return CapacityLedger(store, cfg)


@pytest.fixture()
def waitlist(store, clock, id_factory):
    return WaitlistManager(store, clock, id_factory)


@pytest.fixture()
def service(store, cfg, clock, id_factory):
    return BookingService(store, cfg, clock, id_factory)


def fill(ledger, specialty, day):
    """Book normal appointments until the day stops accepting them."""
    while ledger.can_book(specialty, day):
        ledger.increment(specialty, day)


@pytest.fixture(name="fill")
def fill_fixture():
    return fill
