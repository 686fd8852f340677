"""Create user_profiles and account_reconciliations tables.

user_profiles holds one row per Cognito identity, keyed by its sub.
account_reconciliations records drift between Cognito and the profile
store that an operation could not undo.
"""

from __future__ import annotations

from typing import Sequence
from typing import Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001_user_profiles"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_profiles",
        sa.Column(
            "id",
            sa.Text(),
            primary_key=True,
            comment="Cognito user sub (subject) identifier",
        ),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column(
            "roles",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("user_profiles_email_idx", "user_profiles", ["email"])

    op.create_table(
        "account_reconciliations",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column(
            "identity_id",
            sa.Text(),
            nullable=False,
            comment="Cognito user sub the drift concerns",
        ),
        sa.Column(
            "operation",
            sa.Text(),
            nullable=False,
            comment="createUser or updateUser",
        ),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("resolved_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index(
        "account_reconciliations_identity_idx",
        "account_reconciliations",
        ["identity_id"],
    )


def downgrade() -> None:
    op.drop_index(
        "account_reconciliations_identity_idx",
        table_name="account_reconciliations",
    )
    op.drop_table("account_reconciliations")
    op.drop_index("user_profiles_email_idx", table_name="user_profiles")
    op.drop_table("user_profiles")
