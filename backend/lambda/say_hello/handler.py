"""Lambda entrypoint for the callable greeting."""

from __future__ import annotations

from typing import Any, Mapping

from accountsync.api.greetings import say_hello_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return say_hello_handler(event, context)
