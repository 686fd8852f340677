"""Lambda entrypoint for the Cognito user deletion EventBridge rule.

Removes the profile record of every deleted Cognito user, whichever
path the deletion came from.
"""

from __future__ import annotations

from typing import Any, Mapping

from accountsync.api.identity_events import lambda_handler as _handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _handler(event, context)
