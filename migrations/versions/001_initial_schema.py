"""Initial schema: city nodes and directed street edges.

Revision ID: 001
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── city_nodes ────────────────────────────────────────────────────
    op.create_table(
        "city_nodes",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=False),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("lon", sa.Float, nullable=False),
        sa.Column("elevation", sa.Float, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── street_edges ──────────────────────────────────────────────────
    op.create_table(
        "street_edges",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "from_node_id",
            sa.BigInteger,
            sa.ForeignKey("city_nodes.id"),
            nullable=False,
        ),
        sa.Column(
            "to_node_id",
            sa.BigInteger,
            sa.ForeignKey("city_nodes.id"),
            nullable=False,
        ),
        sa.Column("weight", sa.Float, nullable=False),
        sa.Column("street_name", sa.String(255), nullable=False, server_default=""),
    )
    op.create_index("idx_street_edges_from", "street_edges", ["from_node_id"])


def downgrade() -> None:
    op.drop_table("street_edges")
    op.drop_table("city_nodes")
