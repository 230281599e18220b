"""Create users table

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates the ``users`` table holding local and OAuth2 accounts, with the
email and GitHub username lookup indexes.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=True),
        sa.Column("nickname", sa.String(100), nullable=False),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("developer_type", sa.String(20), nullable=False),
        sa.Column("subscription_plan", sa.String(10), nullable=False, server_default="FREE"),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="Asia/Seoul"),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("preferred_currency", sa.String(3), nullable=False, server_default="KRW"),
        sa.Column("github_username", sa.String(100), nullable=True),
        sa.Column("gitlab_username", sa.String(100), nullable=True),
        sa.Column("provider", sa.String(20), nullable=True),
        sa.Column("provider_id", sa.String(255), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_user_email", "users", ["email"])
    op.create_index("idx_user_github", "users", ["github_username"])


def downgrade() -> None:
    """Drop the users table."""
    op.drop_index("idx_user_github", table_name="users")
    op.drop_index("idx_user_email", table_name="users")
    op.drop_table("users")
