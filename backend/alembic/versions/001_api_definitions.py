"""API definition registry — tbl_GenericAPIDefinition.

Revision ID: 001_api_definitions
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_api_definitions"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tbl_GenericAPIDefinition",
        sa.Column("SerialNo", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("ProjectName", sa.String(50), nullable=False),
        sa.Column("ModuleName", sa.String(50), nullable=False),
        sa.Column("FunctionName", sa.String(50), nullable=False),
        sa.Column("ProcedureName", sa.String(1000), nullable=False),
        sa.Column("IsDebugEnabled", sa.String(1), nullable=False),
        sa.Column("IsActive", sa.String(1), nullable=False),
        sa.Column("APIDescription", sa.String(1000), nullable=False),
        sa.Column("AppServerFilePath", sa.String(255), nullable=False),
        sa.Column("Owner", sa.String(50), nullable=False),
        sa.Column("UpdateBy", sa.String(50), nullable=False),
        sa.Column(
            "UpdateTimeStamp", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "ProjectName", "ModuleName", "FunctionName", name="uq_GenericApi",
        ),
    )


def downgrade() -> None:
    op.drop_table("tbl_GenericAPIDefinition")
