"""Initial schema — users, cohorts, contracts, clauses, amendments and recordings.

Revision ID: 001_initial
Revises: None
Create Date: 2025-08-26

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _fk(target: str) -> sa.ForeignKey:
    return sa.ForeignKey(target, ondelete="RESTRICT", onupdate="CASCADE")


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if updated:
        cols.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
    return cols


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="PARTICIPANT"),
        *_timestamps(),
    )
    op.create_index("users_email_key", "users", ["email"], unique=True)

    op.create_table(
        "cohorts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "cohort_members",
        sa.Column(
            "cohort_id", UUID(as_uuid=True),
            sa.ForeignKey("cohorts.id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_cohort_members_user_id", "cohort_members", ["user_id"])

    op.create_table(
        "contracts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("cohort_id", UUID(as_uuid=True), _fk("cohorts.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_contracts_cohort_id", "contracts", ["cohort_id"])

    op.create_table(
        "clauses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("contract_id", UUID(as_uuid=True), _fk("contracts.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), _fk("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_clauses_contract_id", "clauses", ["contract_id"])

    op.create_table(
        "amendments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), _fk("users.id"), nullable=False),
        sa.Column("clause_id", UUID(as_uuid=True), _fk("clauses.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
    )

    op.create_table(
        "tension_measurements",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("value", sa.Integer, nullable=False),
        sa.Column("context", sa.Text, nullable=True),
        sa.Column("contract_id", UUID(as_uuid=True), _fk("contracts.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), _fk("users.id"), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_tension_measurements_contract_id", "tension_measurements", ["contract_id"])

    op.create_table(
        "journal_entries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("contract_id", UUID(as_uuid=True), _fk("contracts.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), _fk("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_journal_entries_contract_id", "journal_entries", ["contract_id"])

    op.create_table(
        "failure_entries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("lessons", sa.Text, nullable=False),
        sa.Column("contract_id", UUID(as_uuid=True), _fk("contracts.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), _fk("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_failure_entries_contract_id", "failure_entries", ["contract_id"])

    op.create_table(
        "iterations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("outcome", sa.Text, nullable=False),
        sa.Column("failure_entry_id", UUID(as_uuid=True), _fk("failure_entries.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_iterations_failure_entry_id", "iterations", ["failure_entry_id"])


def downgrade() -> None:
    op.drop_table("iterations")
    op.drop_table("failure_entries")
    op.drop_table("journal_entries")
    op.drop_table("tension_measurements")
    op.drop_table("amendments")
    op.drop_table("clauses")
    op.drop_table("contracts")
    op.drop_table("cohort_members")
    op.drop_table("cohorts")
    op.drop_table("users")
