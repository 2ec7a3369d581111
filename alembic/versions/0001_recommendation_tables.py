"""documents, analyses, behavior log and recommendations

Revision ID: 0001_recommendation_tables
Revises:
Create Date: 2026-10-19 10:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import context, op


revision = "0001_recommendation_tables"
down_revision = None
branch_labels = None
depends_on = None


def _is_offline() -> bool:
    try:
        return bool(context.is_offline_mode())
    except Exception:
        return False


def _inspector():
    return sa.inspect(op.get_bind())


def _has_table(name: str) -> bool:
    if _is_offline():
        return False
    return bool(_inspector().has_table(name))


def _has_index(table: str, index_name: str) -> bool:
    if _is_offline() or not _has_table(table):
        return False
    names = {str(i.get("name") or "") for i in _inspector().get_indexes(table)}
    return index_name in names


def _create_indexes(table: str, columns: list[str], *, unique: tuple[str, ...] = ()) -> None:
    for col in columns:
        name = f"ix_{table}_{col}"
        if not _has_index(table, name):
            op.create_index(name, table, [col], unique=col in unique)


def upgrade() -> None:
    if not _has_table("documents"):
        op.create_table(
            "documents",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("owner_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=512), nullable=False, server_default=""),
            sa.Column("file_type", sa.String(length=64), nullable=False, server_default=""),
            sa.Column("mime_type", sa.String(length=128), nullable=True),
            sa.Column("is_shareable", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("group_id", sa.Integer(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
    _create_indexes("documents", ["owner_id", "is_shareable", "group_id", "created_at"])

    if not _has_table("document_analyses"):
        op.create_table(
            "document_analyses",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False, server_default="PENDING"),
            sa.Column("background", sa.Text(), nullable=True),
            sa.Column("content", sa.Text(), nullable=True),
            sa.Column("results", sa.Text(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        )
    _create_indexes("document_analyses", ["document_id"], unique=("document_id",))

    if not _has_table("user_behaviors"):
        op.create_table(
            "user_behaviors",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("document_id", sa.Integer(), nullable=True),
            sa.Column("behavior_type", sa.String(length=32), nullable=False),
            sa.Column("payload_json", sa.Text(), nullable=False, server_default="{}"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
    _create_indexes("user_behaviors", ["user_id", "document_id", "behavior_type", "created_at"])

    if not _has_table("recommendations"):
        op.create_table(
            "recommendations",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("recommended_document_id", sa.Integer(), nullable=True),
            sa.Column("external_paper_id", sa.String(length=128), nullable=True),
            sa.Column("title", sa.String(length=1024), nullable=False, server_default=""),
            sa.Column("authors", sa.Text(), nullable=False, server_default=""),
            sa.Column("source_label", sa.String(length=64), nullable=False, server_default=""),
            sa.Column("url", sa.String(length=1024), nullable=True),
            sa.Column("reason", sa.String(length=255), nullable=False, server_default=""),
            sa.Column("score", sa.Float(), nullable=False, server_default="0"),
            sa.Column("feedback", sa.String(length=20), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
    _create_indexes("recommendations", ["user_id", "created_at"])


def downgrade() -> None:
    for table in ["recommendations", "user_behaviors", "document_analyses", "documents"]:
        if _has_table(table):
            op.drop_table(table)
