"""Amendment decisions — clause version counter and decision audit columns.

Revision ID: 002_amendment_decisions
Revises: 001_initial
Create Date: 2025-09-03

clauses.version is the compare-and-set token used when an amendment is
accepted. amendments.decided_by_id / decided_at record who moved an
amendment out of PENDING and when.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_amendment_decisions"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("clauses") as batch:
        batch.add_column(
            sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        )

    with op.batch_alter_table("amendments") as batch:
        batch.add_column(sa.Column("decided_by_id", UUID(as_uuid=True), nullable=True))
        batch.add_column(sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True))
        batch.create_foreign_key(
            "amendments_decided_by_id_fkey", "users",
            ["decided_by_id"], ["id"],
            ondelete="RESTRICT", onupdate="CASCADE",
        )

    op.create_index(
        "ix_amendments_clause_id_created_at", "amendments", ["clause_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_amendments_clause_id_created_at", table_name="amendments")
    with op.batch_alter_table("amendments") as batch:
        batch.drop_constraint("amendments_decided_by_id_fkey", type_="foreignkey")
        batch.drop_column("decided_at")
        batch.drop_column("decided_by_id")
    with op.batch_alter_table("clauses") as batch:
        batch.drop_column("version")
