from __future__ import annotations

import atexit
import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .common.http import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .core.logging import configure_logging, get_logger
from .database.bootstrap import seed_default_projects
from .entries.controller import register as register_entries
from .mirror.base import EntryMirror
from .projects.controller import register as register_projects
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = get_logger(__name__)


def create_app(*, settings_module: Optional[str] = None, mirror: Optional[EntryMirror] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings, mirror=mirror)
    app.extensions["daylog"] = container
    atexit.register(container.shutdown)

    if getattr(settings, "AUTO_SEED_DB", False):
        seed_default_projects(container.store)

    register_error_handlers(app)
    register_users(app, container)
    register_projects(app, container)
    register_entries(app, container)
    register_reports(app, container)

    logger.info("startup_complete", settings=settings_module, store=type(container.store).__name__)
    return app
