"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2025-09-10 02:06:48.000000+00:00

What:  Creates the `notes` table, the only persisted state of the service.
How:   PostgreSQL-specific defaults: gen_random_uuid() for ids (built into
       PostgreSQL 13+), now() for both timestamps.

Rollback: downgrade() drops the table (all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",

        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier, immutable",
        ),

        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            comment="Note title, 1-255 characters",
        ),

        # TEXT: no length limit on the body
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Note body, may be empty",
        ),

        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),

        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="When this note was last modified (UTC)",
        ),

        sa.PrimaryKeyConstraint("id"),
    )

    # Backs GET /notes, which lists newest first
    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
