"""Add indexes to notes

Revision ID: 002
Revises: 001
Create Date: 2025-08-02 12:00:26.000000+00:00

What:  Indexes on `title` and `created_at`.
Why:   The list view orders by created_at DESC on every page load; title
       backs lookups and prefix searches on titles.
"""

from typing import Sequence, Union
from alembic import op

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index("ix_notes_title", "notes", ["title"])
    op.create_index("ix_notes_created_at", "notes", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_notes_created_at", table_name="notes")
    op.drop_index("ix_notes_title", table_name="notes")
