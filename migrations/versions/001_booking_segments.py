"""Create booking_segments table.

Revision ID: 001_booking_segments
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op


revision = "001_booking_segments"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql(
        """
        CREATE TABLE IF NOT EXISTS booking_segments (
            id                  TEXT PRIMARY KEY,
            original_request_id TEXT NULL,
            user_id             TEXT NOT NULL,
            user_name           TEXT NOT NULL,
            start_date          DATE NOT NULL,
            end_date            DATE NOT NULL,
            status              TEXT NOT NULL
                CHECK (status IN ('reserved', 'confirmed', 'anfrage')),
            property_id         TEXT NOT NULL,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT booking_segments_range_chk CHECK (start_date <= end_date)
        );
        CREATE INDEX IF NOT EXISTS booking_segments_property_start_idx
            ON booking_segments (property_id, start_date);
        CREATE INDEX IF NOT EXISTS booking_segments_request_idx
            ON booking_segments (original_request_id)
            WHERE original_request_id IS NOT NULL;
        """
    )


def downgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql("DROP TABLE IF EXISTS booking_segments CASCADE;")
