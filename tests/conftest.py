"""Pytest configuration and fixtures for the account function tests.

This module provides an in-memory profile database, a fake Cognito
identity provider and API Gateway event factories.
"""

from __future__ import annotations

import json
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from accountsync.exceptions import IdentityProviderError  # noqa: E402
from accountsync.services.identity_provider import IdentityRecord  # noqa: E402


# --- Environment ---


@pytest.fixture(autouse=True)
def account_env(monkeypatch):
    """Configure the environment every handler expects."""
    monkeypatch.setenv('COGNITO_USER_POOL_ID', 'us-east-1_TestPool')
    monkeypatch.setenv('ADMIN_GROUP', 'admin')
    monkeypatch.delenv('REQUIRE_ADMIN_GROUP', raising=False)
    monkeypatch.delenv('DATABASE_URL', raising=False)
    monkeypatch.delenv('DATABASE_SECRET_ARN', raising=False)

    from accountsync.api.accounts import reset_account_service
    from accountsync.services.aws_clients import clear_client_cache

    reset_account_service()
    clear_client_cache()
    yield
    reset_account_service()
    clear_client_cache()


# --- Database Fixtures ---


@pytest.fixture
def profile_engine():
    """Create an isolated in-memory SQLite database with the schema.

    StaticPool keeps one connection so every session sees the same
    in-memory database.
    """
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    from accountsync.db import Base

    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(profile_engine):
    """Session on the test database, closed after the test."""
    from sqlalchemy.orm import Session

    with Session(profile_engine) as session:
        yield session


@pytest.fixture
def profile_store(profile_engine):
    from accountsync.services.profile_store import ProfileStore

    return ProfileStore(profile_engine)


# --- Identity provider fake ---


class FakeIdentityProvider:
    """In-memory stand-in for the Cognito adapter.

    Email uniqueness is enforced under a lock, like the real pool.
    ``failures`` maps a method name to the exception it should raise.
    """

    def __init__(self) -> None:
        self.identities: dict[str, dict[str, str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, Exception] = {}
        self._lock = threading.Lock()

    def _record(self, method: str, identity_id: str) -> None:
        self.calls.append((method, identity_id))
        failure = self.failures.get(method)
        if failure is not None:
            raise failure

    def create_identity(self, email: str, password: str) -> IdentityRecord:
        with self._lock:
            self._record('create_identity', email)
            if any(item['email'] == email for item in self.identities.values()):
                raise IdentityProviderError(
                    'Unable to create identity',
                    provider_code='UsernameExistsException',
                )
            identity_id = str(uuid4())
            self.identities[identity_id] = {'email': email, 'password': password}
        return IdentityRecord(id=identity_id, email=email, username=identity_id)

    def update_email(self, identity_id: str, email: str) -> None:
        self._record('update_email', identity_id)
        self._require(identity_id)['email'] = email

    def update_password(self, identity_id: str, password: str) -> None:
        self._record('update_password', identity_id)
        self._require(identity_id)['password'] = password

    def delete_identity(self, identity_id: str) -> None:
        self._record('delete_identity', identity_id)
        self._require(identity_id)
        del self.identities[identity_id]

    def identity_exists(self, identity_id: str) -> bool:
        self._record('identity_exists', identity_id)
        return identity_id in self.identities

    def _require(self, identity_id: str) -> dict[str, str]:
        if identity_id not in self.identities:
            raise IdentityProviderError(
                'Unknown identity',
                provider_code='UserNotFoundException',
            )
        return self.identities[identity_id]


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def account_service(identity_provider, profile_store):
    from accountsync.api.account_sync import AccountSyncService

    return AccountSyncService(identity_provider, profile_store)


@pytest.fixture
def installed_service(mocker, account_service):
    """Make the handlers use the test service."""
    mocker.patch(
        'accountsync.api.accounts.get_account_service',
        return_value=account_service,
    )
    mocker.patch(
        'accountsync.api.identity_events.get_account_service',
        return_value=account_service,
    )
    return account_service


# --- API Event Fixtures ---


def make_callable_event(
    operation: str,
    data: Any = None,
    *,
    caller_sub: Optional[str] = 'caller-sub',
    groups: str = 'admin',
    raw_body: Optional[str] = None,
) -> dict[str, Any]:
    """Build an API Gateway event for a callable invocation."""
    authorizer: dict[str, Any] = {}
    if caller_sub is not None:
        authorizer = {
            'claims': {
                'sub': caller_sub,
                'cognito:groups': groups,
                'email': 'admin@example.com',
            },
        }
    body = raw_body if raw_body is not None else json.dumps({'data': data or {}})
    return {
        'httpMethod': 'POST',
        'path': f'/v1/accounts/{operation}',
        'headers': {'Content-Type': 'application/json'},
        'requestContext': {
            'requestId': str(uuid4()),
            'authorizer': authorizer,
        },
        'body': body,
        'isBase64Encoded': False,
    }


@pytest.fixture
def callable_event() -> Callable[..., dict[str, Any]]:
    return make_callable_event


@pytest.fixture
def create_payload() -> dict[str, Any]:
    return {
        'name': 'Ada',
        'lastName': 'Lovelace',
        'email': 'ada@example.com',
        'password': 'Sup3r-secret!',
        'phone': '+44 20 7946 0000',
    }
