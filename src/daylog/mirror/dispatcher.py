from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence

from ..core.constants import DEFAULT_MIRROR_WORKERS
from ..core.logging import get_logger
from .base import EntryMirror, MirrorRecord

logger = get_logger(__name__)


class MirrorDispatcher:
    """Fire-and-forget hand-off of new entries to the mirror.

    `submit` never blocks on the mirror and never raises because of it; a
    failed append is logged and dropped.
    """

    def __init__(self, mirror: EntryMirror, *, max_workers: int = DEFAULT_MIRROR_WORKERS):
        self._mirror = mirror
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(max_workers)), thread_name_prefix="daylog-mirror")

    def list_project_names(self) -> Sequence[str]:
        return self._mirror.list_project_names()

    def submit(self, record: MirrorRecord) -> Optional[Future]:
        try:
            return self._executor.submit(self._append, record)
        except RuntimeError:
            # Executor already shut down (process exiting).
            logger.warning("mirror_dispatch_dropped", entry_id=record.entry_id)
            return None

    def _append(self, record: MirrorRecord) -> None:
        try:
            self._mirror.append_entry(record)
        except Exception:
            logger.exception("mirror_append_failed", entry_id=record.entry_id)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
