from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional, Sequence

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build

from ..core.constants import DEFAULT_PROJECT_CACHE_SECONDS
from ..core.logging import get_logger
from .base import EntryMirror, MirrorRecord

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
PROJECTS_RANGE = "Sheet1!A:A"
ENTRIES_RANGE = "TimeEntries!A:F"
PROJECTS_HEADER = "Project Names"


def load_credentials(credentials_info: dict) -> service_account.Credentials:
    return service_account.Credentials.from_service_account_info(credentials_info, scopes=SCOPES)


def build_sheets_service(credentials: service_account.Credentials) -> Any:
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


def authorized_http_factory(credentials: service_account.Credentials) -> Callable[[], Any]:
    """Return a callable producing a new authorized transport per request.

    httplib2.Http is not thread-safe, and the mirror is called from request
    threads and dispatcher workers at the same time.
    """

    def make_http():
        return google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())

    return make_http


class GoogleSheetsMirror(EntryMirror):
    """Google Sheets mirror.

    Project names live in the first column of `Sheet1` (header row
    "Project Names"); entries are appended to the `TimeEntries` tab.
    """

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        service: Any,
        http_factory: Optional[Callable[[], Any]] = None,
        cache_seconds: int = DEFAULT_PROJECT_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._spreadsheet_id = spreadsheet_id
        self._service = service
        self._http_factory = http_factory
        self._cache_seconds = cache_seconds
        self._clock = clock
        self._cache_lock = threading.Lock()
        self._project_cache: list[str] = []
        self._last_project_fetch: Optional[float] = None

    def _values(self):
        return self._service.spreadsheets().values()

    def _execute(self, request):
        if self._http_factory is None:
            return request.execute()
        return request.execute(http=self._http_factory())

    def _cached_names(self, now: float) -> Optional[list[str]]:
        with self._cache_lock:
            if (
                self._project_cache
                and self._last_project_fetch is not None
                and now - self._last_project_fetch < self._cache_seconds
            ):
                return list(self._project_cache)
        return None

    def list_project_names(self) -> Sequence[str]:
        now = self._clock()
        cached = self._cached_names(now)
        if cached is not None:
            return cached

        try:
            response = self._execute(self._values().get(spreadsheetId=self._spreadsheet_id, range=PROJECTS_RANGE))
        except Exception:
            logger.exception("sheets_project_fetch_failed", spreadsheet_id=self._spreadsheet_id)
            with self._cache_lock:
                return list(self._project_cache)

        rows = response.get("values") or []
        if not rows:
            return []

        names = []
        for row in rows:
            name = str(row[0]).strip() if row else ""
            if name and name != PROJECTS_HEADER:
                names.append(name)

        with self._cache_lock:
            self._project_cache = names
            self._last_project_fetch = now
        return list(names)

    def append_entry(self, record: MirrorRecord) -> None:
        try:
            self._execute(
                self._values().append(
                    spreadsheetId=self._spreadsheet_id,
                    range=ENTRIES_RANGE,
                    valueInputOption="USER_ENTERED",
                    body={"values": [record.as_row()]},
                )
            )
        except Exception:
            logger.exception("sheets_append_failed", entry_id=record.entry_id)
