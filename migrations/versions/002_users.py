"""Create users table.

Revision ID: 002_users
Revises: 001_booking_segments
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op


revision = "002_users"
down_revision = "001_booking_segments"
branch_labels = None
depends_on = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql(
        """
        CREATE TABLE IF NOT EXISTS users (
            id              TEXT PRIMARY KEY,
            name            TEXT NOT NULL,
            email           TEXT NOT NULL,
            role            TEXT NOT NULL DEFAULT 'user'
                CHECK (role IN ('user', 'admin')),
            password_hash   TEXT NOT NULL,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        CREATE UNIQUE INDEX IF NOT EXISTS users_email_lower_uq
            ON users (lower(email));
        """
    )


def downgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql("DROP TABLE IF EXISTS users CASCADE;")
