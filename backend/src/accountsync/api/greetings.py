"""Connectivity smoke-test endpoints."""

from __future__ import annotations

from typing import Any, Mapping

from accountsync.utils.logging import configure_logging, get_logger
from accountsync.utils.responses import callable_result, text_response

configure_logging()
logger = get_logger(__name__)


def hello_world_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Answer any request with a plain-text greeting."""
    logger.info("Hello logs!")
    return text_response(200, "Hello from Lambda!", event=event)


def say_hello_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Callable greeting; takes no arguments."""
    return callable_result("Hello World!", event=event)
