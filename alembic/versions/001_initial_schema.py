"""Initial schema: users, notes, data, audit_log.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _envelope_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(80), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("osm_id", sa.String(64), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="Scrypt hash of PBKDF2-derived password"),
        sa.Column("encrypted_openai_key", sa.LargeBinary(), comment="Client-sealed OpenAI key"),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_envelope_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_osm_id", "users", ["osm_id"], unique=True)

    op.create_table(
        "notes",
        sa.Column("user_id", sa.String(80), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("encrypted_content", sa.LargeBinary(), nullable=False),
        *_envelope_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('draft', 'processed', 'committed')", name="ck_notes_status"),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])

    op.create_table(
        "data",
        sa.Column("note_id", sa.String(80), sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("source_type", sa.String(20), nullable=False, comment="DataSourceType enum value"),
        sa.Column("encrypted_content", sa.LargeBinary(), nullable=False),
        *_envelope_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("source_type IN ('text', 'audio', 'image', 'meta')", name="ck_data_source_type"),
    )
    op.create_index("ix_data_note_id", "data", ["note_id"])

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("source_module", sa.String(100)),
        sa.Column("user_id", sa.String(80)),
        sa.Column("note_id", sa.String(80)),
        sa.Column("data", JSONB()),
        *_envelope_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_event_type", "audit_log", ["event_type"])
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"])
    op.create_index("ix_audit_log_note_id", "audit_log", ["note_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_log_note_id", table_name="audit_log")
    op.drop_index("ix_audit_log_user_id", table_name="audit_log")
    op.drop_index("ix_audit_log_event_type", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_data_note_id", table_name="data")
    op.drop_table("data")
    op.drop_index("ix_notes_user_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_users_osm_id", table_name="users")
    op.drop_table("users")
