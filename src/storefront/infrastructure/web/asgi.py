"""ASGI entry point: ``uvicorn storefront.infrastructure.web.asgi:app``."""

from __future__ import annotations

from storefront.infrastructure.bootstrap import build_container
from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.web.app import create_app

settings = Settings.from_env()
configure_logging(settings)
app = create_app(build_container(settings))
