"""Create reservations table."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("portal", sa.String(length=32), nullable=False),
        sa.Column("floor", sa.String(length=16), nullable=False),
        sa.Column("door", sa.String(length=16), nullable=False),
        sa.Column("reserved_on", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("CONFIRMED", name="reservationstatus"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("id"),
        sa.UniqueConstraint("reserved_on", name="uq_reservations_reserved_on"),
    )
    op.create_index("ix_reservations_unit", "reservations", ["portal", "floor"])


def downgrade() -> None:
    op.drop_index("ix_reservations_unit", table_name="reservations")
    op.drop_table("reservations")
    sa.Enum(name="reservationstatus").drop(op.get_bind(), checkfirst=True)
