from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    slot_type = postgresql.ENUM("standard", "accessible", "ev_charging", name="slottype")
    slot_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "parking_spaces",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("slot_label", sa.String(length=32), nullable=False),
        sa.Column("floor_level", sa.String(length=32)),
        sa.Column("slot_type", slot_type, server_default="standard"),
        sa.Column("facility_name", sa.String(length=255), nullable=False),
        sa.Column("facility_address", sa.String(length=512), nullable=False),
        sa.Column("price_per_hour", sa.Numeric(10, 2)),
        sa.Column("is_occupied", sa.Boolean(), server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    booking_status = postgresql.ENUM("upcoming", "active", "completed", "cancelled", name="bookingstatus")
    booking_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("space_id", sa.String(length=64), sa.ForeignKey("parking_spaces.id", ondelete="CASCADE")),
        sa.Column("facility_name", sa.String(length=255), nullable=False),
        sa.Column("facility_address", sa.String(length=512), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price_per_hour", sa.Numeric(10, 2)),
        sa.Column("total_cost", sa.Numeric(10, 2), server_default="0"),
        sa.Column("status", booking_status, server_default="upcoming"),
        sa.Column("vehicle_plate", sa.String(length=32)),
        sa.Column("version", sa.Integer(), server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("canceled_at", sa.DateTime(timezone=True)),
        sa.Column("canceled_by", sa.String(length=64)),
        sa.Column("cancellation_reason", sa.String(length=255)),
        sa.CheckConstraint("end_time > start_time", name="ck_booking_window_positive"),
        sa.CheckConstraint("total_cost >= 0", name="ck_booking_cost_non_negative"),
    )
    op.create_index("ix_bookings_start_time", "bookings", ["start_time"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    actor_type = postgresql.ENUM("user", "system", name="actortype")
    actor_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor_type", actor_type),
        sa.Column("actor", sa.String(length=64)),
        sa.Column("booking_id", sa.String(length=64)),
        sa.Column("action", sa.String(length=255)),
        sa.Column("payload", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_booking_id", "audit_logs", ["booking_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_booking_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_start_time", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("parking_spaces")
    postgresql.ENUM(name="actortype").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="slottype").drop(op.get_bind(), checkfirst=True)
