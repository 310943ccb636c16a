from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import DEFAULT_MIRROR_WORKERS
from .entries.service import AdmissionService, EntryQueryService
from .mirror.base import EntryMirror
from .mirror.dispatcher import MirrorDispatcher
from .mirror.factory import build_mirror
from .projects.service import ProjectService
from .reports.service import AggregationService
from .store.factory import build_store
from .store.repository import EntityStore
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    store: EntityStore
    dispatcher: MirrorDispatcher

    auth_service: AuthService
    user_service: UserService
    project_service: ProjectService
    admission_service: AdmissionService
    entry_query_service: EntryQueryService
    aggregation_service: AggregationService

    def shutdown(self) -> None:
        self.dispatcher.shutdown(wait=True)


def build_container(settings: Any, *, mirror: Optional[EntryMirror] = None) -> Container:
    dispatcher = MirrorDispatcher(
        mirror if mirror is not None else build_mirror(settings),
        max_workers=int(getattr(settings, "MIRROR_WORKERS", DEFAULT_MIRROR_WORKERS)),
    )
    store = build_store(settings, dispatcher=dispatcher)

    return Container(
        store=store,
        dispatcher=dispatcher,
        auth_service=AuthService(store),
        user_service=UserService(store),
        project_service=ProjectService(store),
        admission_service=AdmissionService(store),
        entry_query_service=EntryQueryService(store),
        aggregation_service=AggregationService(store),
    )
