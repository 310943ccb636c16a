from __future__ import annotations

import threading
import time
from decimal import Decimal

import pytest

from daylog.core.exceptions import CapacityExceededError, NotFoundError, ValidationError
from daylog.entries.service import AdmissionService


def _user_and_project(store):
    user = store.create_user(username="alice", password_hash="h")
    project = store.create_project("Client A")
    return user, project


def _day_total(store, user_id, date):
    return sum((e.time_spent for e in store.list_entries_for_user_and_date(user_id, date)), Decimal("0"))


def test_two_halves_fill_a_day(store):
    user, project = _user_and_project(store)
    svc = AdmissionService(store)

    svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=0.5)
    svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent="0.5")

    assert _day_total(store, user.id, "2024-01-02") == Decimal("1.0")


def test_exceeding_the_cap_is_rejected_with_total_and_date(store):
    user, project = _user_and_project(store)
    svc = AdmissionService(store)
    svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=0.5)

    with pytest.raises(CapacityExceededError) as exc_info:
        svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=1)

    err = exc_info.value
    assert err.current_total == Decimal("0.5")
    assert err.date == "2024-01-02"
    assert err.requested == Decimal("1.0")
    assert str(err) == "Cannot exceed 1 day per date. You already logged 0.5 days for 2024-01-02."
    assert _day_total(store, user.id, "2024-01-02") == Decimal("0.5")


def test_cap_holds_over_any_sequence_of_requests(store):
    user, project = _user_and_project(store)
    svc = AdmissionService(store)
    accepted = Decimal("0")

    for amount in [0.5, 1.0, 0.5, 0.5, 1.0, 0.5]:
        try:
            entry = svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-03-04", time_spent=amount)
            accepted += entry.time_spent
        except CapacityExceededError as e:
            assert e.current_total == accepted
        assert _day_total(store, user.id, "2024-03-04") == accepted
        assert accepted <= Decimal("1.0")

    assert accepted == Decimal("1.0")


def test_cap_is_per_user_and_per_date(store):
    user, project = _user_and_project(store)
    other = store.create_user(username="bob", password_hash="h")
    svc = AdmissionService(store)

    svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=1)
    svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-03", time_spent=1)
    svc.admit_entry(user_id=other.id, project_id=project.id, date="2024-01-02", time_spent=1)

    assert len(store.list_all_entries()) == 3


@pytest.mark.parametrize("amount", [0, 0.25, 0.75, 1.5, 2, -0.5, "abc", None, True, "NaN"])
def test_invalid_time_spent_is_a_validation_error(store, amount):
    user, project = _user_and_project(store)

    with pytest.raises(ValidationError):
        AdmissionService(store).admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=amount)

    assert store.list_all_entries() == []


@pytest.mark.parametrize("date", ["2024-13-01", "2024-1-5", "01/05/2024", "", None, "2024-01-05T10:00:00"])
def test_malformed_date_is_a_validation_error(store, date):
    user, project = _user_and_project(store)

    with pytest.raises(ValidationError):
        AdmissionService(store).admit_entry(user_id=user.id, project_id=project.id, date=date, time_spent=1)


@pytest.mark.parametrize("project_ref", [1.7, "1.7", "one", None, True])
def test_malformed_project_id_is_a_validation_error(store, project_ref):
    user, project = _user_and_project(store)
    assert project.id == 1

    with pytest.raises(ValidationError):
        AdmissionService(store).admit_entry(user_id=user.id, project_id=project_ref, date="2024-01-02", time_spent=1)

    assert store.list_all_entries() == []


@pytest.mark.parametrize("project_ref", [1, "1", 1.0])
def test_whole_number_project_ids_are_accepted(store, project_ref):
    user, _ = _user_and_project(store)

    entry = AdmissionService(store).admit_entry(user_id=user.id, project_id=project_ref, date="2024-01-02", time_spent=1)

    assert entry.project_id == 1


def test_unknown_project_propagates_not_found(store):
    user, _ = _user_and_project(store)

    with pytest.raises(NotFoundError):
        AdmissionService(store).admit_entry(user_id=user.id, project_id=999, date="2024-01-02", time_spent=1)

    assert store.list_entries_for_user(user.id) == []


class SlowDayReads:
    """Widens the read-then-write window so an unserialised admission would race."""

    def __init__(self, inner):
        self._inner = inner

    def list_entries_for_user_and_date(self, user_id, date):
        rows = self._inner.list_entries_for_user_and_date(user_id, date)
        time.sleep(0.05)
        return rows

    def __getattr__(self, name):
        return getattr(self._inner, name)


def test_concurrent_full_days_admit_exactly_one(store):
    user, project = _user_and_project(store)
    svc = AdmissionService(SlowDayReads(store))
    barrier = threading.Barrier(2)
    results = []

    def submit():
        barrier.wait()
        try:
            svc.admit_entry(user_id=user.id, project_id=project.id, date="2024-01-02", time_spent=1.0)
            results.append("accepted")
        except CapacityExceededError:
            results.append("rejected")

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(results) == ["accepted", "rejected"]
    assert _day_total(store, user.id, "2024-01-02") == Decimal("1.0")


def test_concurrent_admissions_for_different_days_do_not_block_each_other(store):
    user, project = _user_and_project(store)
    svc = AdmissionService(store)
    errors = []

    def submit(date):
        try:
            svc.admit_entry(user_id=user.id, project_id=project.id, date=date, time_spent=1.0)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=submit, args=(f"2024-02-0{i}",)) for i in range(1, 6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert errors == []
    assert len(store.list_entries_for_user(user.id)) == 5
