from __future__ import annotations

import pytest

from daylog.database.bootstrap import create_schema
from daylog.database.connection import create_db_engine
from daylog.store.memory_store import InMemoryEntityStore
from daylog.store.sql_store import SqlEntityStore

BACKENDS = ["memory", "sql"]


class RecordingMirror:
    """In-memory stand-in for the spreadsheet mirror."""

    def __init__(self, names=()):
        self.names = list(names)
        self.records = []
        self.name_calls = 0

    def list_project_names(self):
        self.name_calls += 1
        return list(self.names)

    def append_entry(self, record):
        self.records.append(record)


@pytest.fixture
def store_factory(tmp_path):
    engines = []

    def make(kind: str, *, dispatcher=None, name: str = "daylog"):
        if kind == "memory":
            return InMemoryEntityStore(dispatcher)
        engine = create_db_engine(f"sqlite:///{tmp_path / (name + '.db')}")
        create_schema(engine)
        engines.append(engine)
        return SqlEntityStore(engine, dispatcher)

    yield make

    for engine in engines:
        engine.dispose()


@pytest.fixture(params=BACKENDS)
def store(request, store_factory):
    return store_factory(request.param)


@pytest.fixture
def mirror():
    return RecordingMirror()
