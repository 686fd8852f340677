"""Lambda entrypoint for the plain-text smoke test."""

from __future__ import annotations

from typing import Any, Mapping

from accountsync.api.greetings import hello_world_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return hello_world_handler(event, context)
