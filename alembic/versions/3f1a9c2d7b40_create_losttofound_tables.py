"""create users, auth_sessions, user_profiles, pets and finder_messages

Revision ID: 3f1a9c2d7b40
Revises:
Create Date: 2026-10-19 09:12:44.201377

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("last_used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("plan", sa.String(10), nullable=False, server_default="free"),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_profiles_user_id", "user_profiles", ["user_id"], unique=True)

    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="home"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("behavior_notes", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.String(2048), nullable=True),
        sa.Column("photo_url_2", sa.String(2048), nullable=True),
        sa.Column("photo_url_3", sa.String(2048), nullable=True),
        sa.Column("contact_email_primary", sa.String(320), nullable=True),
        sa.Column("contact_email_backup", sa.String(320), nullable=True),
        sa.Column("contact_phone_primary", sa.String(50), nullable=True),
        sa.Column("contact_phone_backup", sa.String(50), nullable=True),
        sa.Column("is_travel_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("travel_city", sa.String(255), nullable=True),
        sa.Column("travel_region", sa.String(255), nullable=True),
        sa.Column("travel_radius_km", sa.Float(), nullable=True),
        sa.Column("travel_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('home', 'lost', 'found')", name="ck_pets_status"),
        sa.CheckConstraint(
            "travel_radius_km IS NULL OR travel_radius_km >= 0", name="ck_pets_travel_radius",
        ),
    )
    op.create_index("ix_pets_owner_id", "pets", ["owner_id"])
    op.create_index("ix_pets_slug", "pets", ["slug"], unique=True)
    op.create_index("ix_pets_status", "pets", ["status"])

    op.create_table(
        "finder_messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("pet_id", sa.Uuid(), sa.ForeignKey("pets.id"), nullable=False),
        sa.Column("report_type", sa.String(10), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("general_location", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("report_type IN ('have', 'saw')", name="ck_finder_messages_type"),
    )
    op.create_index("ix_finder_messages_pet_id", "finder_messages", ["pet_id"])
    op.create_index("ix_finder_messages_created_at", "finder_messages", ["created_at"])


def downgrade() -> None:
    op.drop_table("finder_messages")
    op.drop_table("pets")
    op.drop_table("user_profiles")
    op.drop_table("auth_sessions")
    op.drop_table("users")
