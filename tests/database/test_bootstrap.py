from __future__ import annotations

from werkzeug.security import check_password_hash

from daylog.core.constants import DEFAULT_PROJECTS
from daylog.core.enums import Role
from daylog.database.bootstrap import ensure_admin_user, seed_default_projects


class ExplodingProjects:
    def list_active_projects(self):
        raise RuntimeError("database down")


def test_seed_creates_default_projects_once(store):
    seed_default_projects(store)
    seed_default_projects(store)

    assert [p.name for p in store.list_projects()] == list(DEFAULT_PROJECTS)


def test_seed_skips_when_projects_exist(store):
    store.create_project("Existing")

    seed_default_projects(store)

    assert [p.name for p in store.list_projects()] == ["Existing"]


def test_seed_runs_when_only_inactive_projects_exist(store):
    old = store.create_project("Retired")
    store.deactivate_project(old.id)

    seed_default_projects(store)

    assert [p.name for p in store.list_active_projects()] == list(DEFAULT_PROJECTS)


def test_seed_failure_is_logged_not_raised():
    seed_default_projects(ExplodingProjects())


def test_ensure_admin_user_creates_then_reuses(store):
    admin = ensure_admin_user(store, username="root", password="s3cret!")

    assert admin.role == Role.ADMIN
    assert check_password_hash(admin.password_hash, "s3cret!")
    assert ensure_admin_user(store, username="root", password="other") == admin
    assert len(store.list_users()) == 1
