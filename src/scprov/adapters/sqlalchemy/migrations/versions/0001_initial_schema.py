"""Initial provisioning schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from scprov.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_NAMED_TABLES = (
    "service_provider",
    "part_category",
    "part_type",
    "line_item_type",
    "service_code_type",
)


def _id_column() -> sa.Column[object]:
    return sa.Column("id", sa.Uuid(), primary_key=True)


def upgrade() -> None:
    for name in _NAMED_TABLES:
        op.create_table(
            name,
            _id_column(),
            sa.Column("name", sa.String(), nullable=False, unique=True),
        )

    op.create_table(
        "pay_grade_type",
        _id_column(),
        sa.Column(
            "service_provider_id",
            sa.Uuid(),
            sa.ForeignKey("service_provider.id"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.UniqueConstraint("service_provider_id", "name"),
    )
    op.create_table(
        "pay_grade",
        _id_column(),
        sa.Column(
            "pay_grade_type_id", sa.Uuid(), sa.ForeignKey("pay_grade_type.id"), nullable=False
        ),
        sa.Column("name", sa.String(), nullable=False),
    )

    op.create_table(
        "part",
        _id_column(),
        sa.Column("number", sa.String(), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("part_category_id", sa.Uuid(), sa.ForeignKey("part_category.id"), nullable=True),
        sa.Column("part_type_id", sa.Uuid(), sa.ForeignKey("part_type.id"), nullable=True),
        sa.Column("serialized", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("ir_price_available", sa.Boolean(), nullable=False),
        sa.Column("returnable", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "line_item",
        _id_column(),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column(
            "line_item_type_id", sa.Uuid(), sa.ForeignKey("line_item_type.id"), nullable=True
        ),
    )
    op.create_table(
        "line_item_part",
        _id_column(),
        sa.Column("line_item_id", sa.Uuid(), sa.ForeignKey("line_item.id"), nullable=False),
        sa.Column("part_id", sa.Uuid(), sa.ForeignKey("part.id"), nullable=False),
        sa.UniqueConstraint("line_item_id", "part_id"),
    )
    op.create_table(
        "service_code",
        _id_column(),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("short_name", sa.String(), nullable=False),
        sa.Column(
            "service_code_type_id",
            sa.Uuid(),
            sa.ForeignKey("service_code_type.id"),
            nullable=True,
        ),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("smart_home", sa.Boolean(), nullable=False),
        sa.Column("chargeback", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "line_item_service_code",
        _id_column(),
        sa.Column("service_code_id", sa.Uuid(), sa.ForeignKey("service_code.id"), nullable=False),
        sa.Column("line_item_id", sa.Uuid(), sa.ForeignKey("line_item.id"), nullable=False),
        sa.UniqueConstraint("service_code_id", "line_item_id"),
    )

    op.create_table(
        "pay_grade_version",
        _id_column(),
        sa.Column("pay_grade_id", sa.Uuid(), sa.ForeignKey("pay_grade.id"), nullable=False),
        sa.Column("effective", sa.Date(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
    )
    op.create_table(
        "pay_grade_amount",
        _id_column(),
        sa.Column(
            "version_id",
            sa.Uuid(),
            sa.ForeignKey("pay_grade_version.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("line_item_id", sa.Uuid(), sa.ForeignKey("line_item.id"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.UniqueConstraint("version_id", "line_item_id"),
    )


def downgrade() -> None:
    for name in (
        "pay_grade_amount",
        "pay_grade_version",
        "line_item_service_code",
        "service_code",
        "line_item_part",
        "line_item",
        "part",
        "pay_grade",
        "pay_grade_type",
        *reversed(_NAMED_TABLES),
    ):
        op.drop_table(name)
