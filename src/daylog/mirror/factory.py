from __future__ import annotations

import json
from typing import Any, Optional

from ..core.constants import DEFAULT_PROJECT_CACHE_SECONDS
from ..core.logging import get_logger
from .base import EntryMirror, NullMirror
from .sheets import GoogleSheetsMirror, authorized_http_factory, build_sheets_service, load_credentials

logger = get_logger(__name__)


def parse_service_account_json(raw: Optional[str]) -> Optional[dict]:
    """Parse GOOGLE_SERVICE_ACCOUNT_JSON, normalising escaped newlines in the key."""
    if not raw:
        return None
    try:
        credentials = json.loads(raw)
    except ValueError:
        logger.error("invalid_service_account_json")
        return None
    if not isinstance(credentials, dict):
        logger.error("invalid_service_account_json")
        return None
    if credentials.get("private_key"):
        credentials["private_key"] = credentials["private_key"].replace("\\n", "\n")
    return credentials


def build_mirror(settings: Any) -> EntryMirror:
    spreadsheet_id = getattr(settings, "GOOGLE_SHEET_ID", None)
    credentials = parse_service_account_json(getattr(settings, "GOOGLE_SERVICE_ACCOUNT_JSON", None))

    if not credentials or not spreadsheet_id:
        logger.warning("sheets_mirror_disabled", has_credentials=bool(credentials), has_sheet=bool(spreadsheet_id))
        return NullMirror()

    try:
        google_credentials = load_credentials(credentials)
        service = build_sheets_service(google_credentials)
    except Exception:
        logger.exception("sheets_mirror_init_failed")
        return NullMirror()

    logger.info("sheets_mirror_ready", client_email=credentials.get("client_email"), spreadsheet_id=spreadsheet_id)
    return GoogleSheetsMirror(
        spreadsheet_id=spreadsheet_id,
        service=service,
        http_factory=authorized_http_factory(google_credentials),
        cache_seconds=int(getattr(settings, "PROJECT_CACHE_SECONDS", DEFAULT_PROJECT_CACHE_SECONDS)),
    )
