"""Lambda entrypoint for the createUser, updateUser and deleteUser callables."""

from __future__ import annotations

from typing import Any, Mapping

from accountsync.api.accounts import lambda_handler as _handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _handler(event, context)
