from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal

from daylog.mirror.base import MirrorRecord, NullMirror
from daylog.mirror.dispatcher import MirrorDispatcher
from daylog.mirror.factory import build_mirror, parse_service_account_json
from daylog.mirror.sheets import GoogleSheetsMirror


class _Request:
    def __init__(self, fn, transports):
        self._fn = fn
        self._transports = transports

    def execute(self, http=None):
        self._transports.append(http)
        return self._fn()


class FakeValues:
    def __init__(self):
        self.rows = [["Project Names"], ["Client A"], [], [""], ["Client B "]]
        self.fail_get = False
        self.fail_append = False
        self.get_calls = []
        self.appended = []
        self.transports = []

    def get(self, *, spreadsheetId, range):
        self.get_calls.append((spreadsheetId, range))

        def run():
            if self.fail_get:
                raise OSError("network down")
            return {"values": self.rows}

        return _Request(run, self.transports)

    def append(self, *, spreadsheetId, range, valueInputOption, body):
        def run():
            if self.fail_append:
                raise OSError("network down")
            self.appended.append((spreadsheetId, range, valueInputOption, body))
            return {}

        return _Request(run, self.transports)


class FakeSheetsService:
    def __init__(self):
        self.values_api = FakeValues()

    def spreadsheets(self):
        return self

    def values(self):
        return self.values_api


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _mirror(service, clock):
    return GoogleSheetsMirror(spreadsheet_id="sheet-1", service=service, cache_seconds=300, clock=clock)


def _record():
    return MirrorRecord(
        entry_id=7,
        username="alice",
        project_name="Client A",
        date="2024-01-05",
        time_spent=Decimal("0.5"),
        created_at=datetime(2024, 1, 5, 9, 30),
    )


def test_project_names_skip_header_and_blanks():
    service = FakeSheetsService()

    names = _mirror(service, FakeClock()).list_project_names()

    assert names == ["Client A", "Client B"]
    assert service.values_api.get_calls == [("sheet-1", "Sheet1!A:A")]


def test_project_names_cached_for_five_minutes():
    service, clock = FakeSheetsService(), FakeClock()
    mirror = _mirror(service, clock)

    mirror.list_project_names()
    clock.now += 299
    mirror.list_project_names()
    assert len(service.values_api.get_calls) == 1

    clock.now += 2
    service.values_api.rows = [["Client C"]]
    assert mirror.list_project_names() == ["Client C"]
    assert len(service.values_api.get_calls) == 2


def test_fetch_failure_returns_last_good_list():
    service, clock = FakeSheetsService(), FakeClock()
    mirror = _mirror(service, clock)
    mirror.list_project_names()

    clock.now += 301
    service.values_api.fail_get = True

    assert mirror.list_project_names() == ["Client A", "Client B"]


def test_fetch_failure_without_cache_returns_empty():
    service = FakeSheetsService()
    service.values_api.fail_get = True

    assert _mirror(service, FakeClock()).list_project_names() == []


def test_append_entry_writes_one_row():
    service = FakeSheetsService()

    _mirror(service, FakeClock()).append_entry(_record())

    [(sheet, rng, mode, body)] = service.values_api.appended
    assert (sheet, rng, mode) == ("sheet-1", "TimeEntries!A:F", "USER_ENTERED")
    assert body == {"values": [[7, "alice", "Client A", "2024-01-05", 0.5, "2024-01-05T09:30:00"]]}


def test_append_failure_is_swallowed():
    service = FakeSheetsService()
    service.values_api.fail_append = True

    assert _mirror(service, FakeClock()).append_entry(_record()) is None


class ExplodingMirror:
    def list_project_names(self):
        return []

    def append_entry(self, record):
        raise RuntimeError("boom")


def test_dispatcher_drops_failed_appends():
    dispatcher = MirrorDispatcher(ExplodingMirror())

    future = dispatcher.submit(_record())
    dispatcher.shutdown()

    assert future.exception() is None


def test_dispatcher_after_shutdown_drops_silently():
    dispatcher = MirrorDispatcher(NullMirror())
    dispatcher.shutdown()

    assert dispatcher.submit(_record()) is None


def test_service_account_json_private_key_newlines_normalised():
    raw = json.dumps({"client_email": "svc@example.com", "private_key": "-----BEGIN-----\\nabc\\n-----END-----"})

    parsed = parse_service_account_json(raw)

    assert parsed["private_key"] == "-----BEGIN-----\nabc\n-----END-----"


def test_invalid_service_account_json_is_ignored():
    assert parse_service_account_json("{not json") is None
    assert parse_service_account_json("[1, 2]") is None
    assert parse_service_account_json(None) is None


class _Settings:
    GOOGLE_SERVICE_ACCOUNT_JSON = None
    GOOGLE_SHEET_ID = "sheet-1"


def test_build_mirror_without_credentials_is_null():
    assert isinstance(build_mirror(_Settings()), NullMirror)


def test_each_request_gets_its_own_transport():
    service = FakeSheetsService()
    mirror = GoogleSheetsMirror(spreadsheet_id="sheet-1", service=service, http_factory=object, clock=FakeClock())

    mirror.list_project_names()
    mirror.append_entry(_record())
    mirror.append_entry(_record())

    transports = service.values_api.transports
    assert len(transports) == 3
    assert all(t is not None for t in transports)
    assert len({id(t) for t in transports}) == 3


def test_concurrent_reads_and_appends_share_a_consistent_cache():
    service, clock = FakeSheetsService(), FakeClock()
    mirror = GoogleSheetsMirror(spreadsheet_id="sheet-1", service=service, http_factory=object, clock=clock)
    results = []
    start = threading.Barrier(8)

    def read():
        start.wait()
        results.append(mirror.list_project_names())

    def append():
        start.wait()
        mirror.append_entry(_record())

    threads = [threading.Thread(target=read) for _ in range(4)] + [threading.Thread(target=append) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == [["Client A", "Client B"]] * 4
    assert len(service.values_api.appended) == 4
    assert len({id(t) for t in service.values_api.transports}) == len(service.values_api.transports)
