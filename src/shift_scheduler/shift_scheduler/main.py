from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .calendar.controller import register as register_calendar
from .container import Container, build_container
from .requests.controller import register as register_requests
from .shifts.controller import register as register_shifts
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        api_config = getattr(settings, "API_CONFIG")
        container = build_container(
            api_config=api_config,
            cache_ttl_seconds=float(getattr(settings, "CACHE_TTL_SECONDS", 0)),
            fetch_limit=int(getattr(settings, "FETCH_LIMIT", 100)),
            cascade_limit=int(getattr(settings, "CASCADE_FETCH_LIMIT", 1000)),
        )
        logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    app.extensions["shift_scheduler"] = container

    register_users(app, container)
    register_requests(app, container)
    register_shifts(app, container)
    register_calendar(app, container)

    return app
