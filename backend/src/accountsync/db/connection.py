"""Database connection helpers for Lambda runtime."""

from __future__ import annotations

import os
from urllib.parse import quote_plus

from accountsync.exceptions import ConfigurationError
from accountsync.services.aws_clients import get_rds_client
from accountsync.services.secrets import get_secret_json


def get_database_url() -> str:
    """Resolve the profile database URL from env or Secrets Manager."""

    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    secret_arn = os.getenv("DATABASE_SECRET_ARN")
    if not secret_arn:
        raise ConfigurationError("DATABASE_URL or DATABASE_SECRET_ARN")

    secret = get_secret_json(secret_arn)
    username = (
        os.getenv("DATABASE_USERNAME") or secret.get("username") or secret.get("user")
    )
    password = secret.get("password")
    host = os.getenv("DATABASE_HOST") or secret.get("host")
    if use_iam_auth():
        host = os.getenv("DATABASE_PROXY_ENDPOINT") or host
    port = os.getenv("DATABASE_PORT") or secret.get("port") or 5432
    database = (
        secret.get("dbname")
        or secret.get("database")
        or os.getenv("DATABASE_NAME")
        or "accounts"
    )

    if not username or not host:
        raise ConfigurationError("database username/host in secret")

    if use_iam_auth():
        password = _generate_iam_token(str(host), int(port), str(username))
    elif not password:
        raise ConfigurationError("database password in secret")

    return (
        "postgresql+psycopg://"
        f"{quote_plus(str(username))}:{quote_plus(str(password))}"
        f"@{host}:{port}/{database}"
    )


def use_iam_auth() -> bool:
    """Return True if IAM auth is enabled."""

    return str(os.getenv("DATABASE_IAM_AUTH", "")).lower() in {"1", "true", "yes"}


def _generate_iam_token(host: str, port: int, username: str) -> str:
    """Generate an IAM auth token for RDS Proxy."""

    region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
    if not region:
        raise ConfigurationError("AWS_REGION")

    return get_rds_client(region).generate_db_auth_token(
        DBHostname=host, Port=port, DBUsername=username
    )
