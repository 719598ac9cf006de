"""
ASGI entrypoint: `uvicorn components.gateway.main:app`.

Configuration is read once here; missing MONGO_URI, EMAIL_USER, EMAIL_PASS
or JWT_SECRET stops the process before it serves anything.
"""
from __future__ import annotations
import logging

from components.authservice import ConfigError, load_settings

from .app import create_app
from .observability import configure_logging

logger = logging.getLogger("gateway")

try:
    settings = load_settings()
except ConfigError as ex:
    configure_logging()
    logger.critical("startup.config_error: %s", ex)
    raise SystemExit(1) from ex

configure_logging(settings.LOG_LEVEL)
app = create_app(settings)
