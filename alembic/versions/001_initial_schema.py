"""Initial database schema

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-01

Creates users, trips, carts, travelers, flight booking drafts and
flight bookings.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

authprovider = postgresql.ENUM("google", "apple", name="authprovider", create_type=False)
plantype = postgresql.ENUM("free", "premium", name="plantype", create_type=False)
trip_status = postgresql.ENUM("generating", "completed", "failed", name="trip_status", create_type=False)
cart_status = postgresql.ENUM("pending", "checkout", name="cart_status", create_type=False)
gender = postgresql.ENUM("male", "female", name="gender", create_type=False)
flight_booking_status = postgresql.ENUM(
    "pending_payment",
    "confirmed",
    "cancelled",
    "failed",
    name="flight_booking_status",
    create_type=False,
)

ENUMS = (authprovider, plantype, trip_status, cart_status, gender, flight_booking_status)


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.text("now()")),
    ]


def _user_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["user_id"], ["users.id"], name=f"fk_{table}_user_id_users", ondelete="CASCADE"
    )


def upgrade() -> None:
    """Create initial database schema."""
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("provider", authprovider, nullable=False),
        sa.Column("social_id", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("plan", plantype, nullable=False, server_default="free"),
        sa.Column("trips_generated", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_provider_social_id", "users", ["provider", "social_id"], unique=True)

    # Trips
    op.create_table(
        "trips",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("origin", sa.String(255), nullable=True),
        sa.Column("start_date", sa.BigInteger, nullable=False, comment="Epoch milliseconds"),
        sa.Column("end_date", sa.BigInteger, nullable=False, comment="Epoch milliseconds"),
        sa.Column("budget", sa.String(100), nullable=False),
        sa.Column("travelers", sa.Integer, nullable=False, server_default="1"),
        sa.Column("interests", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("skip_flights", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("skip_hotel", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("preferred_flight_time", sa.String(20), nullable=True),
        sa.Column("status", trip_status, nullable=False, server_default="generating"),
        sa.Column("itinerary", postgresql.JSONB, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column(
            "generation_version",
            sa.Integer,
            nullable=False,
            server_default="1",
            comment="Only the run started for the current version may write",
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_trips"),
        _user_fk("trips"),
        sa.CheckConstraint("travelers >= 1", name="ck_trips_travelers_positive"),
        sa.CheckConstraint("end_date >= start_date", name="ck_trips_valid_date_range"),
    )
    op.create_index("ix_trips_user_id", "trips", ["user_id"])
    op.create_index("ix_trips_status", "trips", ["status"])

    # Carts
    op.create_table(
        "carts",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("items", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("status", cart_status, nullable=False, server_default="pending"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_carts"),
        _user_fk("carts"),
        sa.ForeignKeyConstraint(
            ["trip_id"], ["trips.id"], name="fk_carts_trip_id_trips", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("trip_id", "user_id", name="uq_carts_trip_user"),
    )
    op.create_index("ix_carts_user_id", "carts", ["user_id"])
    op.create_index("ix_carts_trip_id", "carts", ["trip_id"])

    # Travelers
    op.create_table(
        "travelers",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=False),
        sa.Column("gender", gender, nullable=False),
        sa.Column("passport_number", sa.String(50), nullable=True),
        sa.Column("passport_issuing_country", sa.String(2), nullable=True),
        sa.Column("passport_expiry_date", sa.Date, nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone_country_code", sa.String(8), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_travelers"),
        _user_fk("travelers"),
    )
    op.create_index("ix_travelers_user_id", "travelers", ["user_id"])

    # Flight booking drafts
    op.create_table(
        "flight_booking_drafts",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("offer_id", sa.String(100), nullable=False),
        sa.Column("offer_passenger_ids", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("flight", postgresql.JSONB, nullable=True),
        sa.Column("passengers", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("seat_selections", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("baggage", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("policy_acknowledged", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_flight_booking_drafts"),
        _user_fk("flight_booking_drafts"),
        sa.ForeignKeyConstraint(
            ["trip_id"],
            ["trips.id"],
            name="fk_flight_booking_drafts_trip_id_trips",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_flight_booking_drafts_user_id", "flight_booking_drafts", ["user_id"])
    op.create_index("ix_flight_booking_drafts_trip_id", "flight_booking_drafts", ["trip_id"])

    # Flight bookings
    op.create_table(
        "flight_bookings",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("duffel_order_id", sa.String(100), nullable=False),
        sa.Column("booking_reference", sa.String(20), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("outbound_flight", postgresql.JSONB, nullable=False),
        sa.Column("return_flight", postgresql.JSONB, nullable=True),
        sa.Column("passengers", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("status", flight_booking_status, nullable=False, server_default="pending_payment"),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "confirmation_email_sent", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_flight_bookings"),
        _user_fk("flight_bookings"),
        sa.ForeignKeyConstraint(
            ["trip_id"],
            ["trips.id"],
            name="fk_flight_bookings_trip_id_trips",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("duffel_order_id", name="uq_flight_bookings_duffel_order_id"),
    )
    op.create_index("ix_flight_bookings_user_id", "flight_bookings", ["user_id"])
    op.create_index("ix_flight_bookings_trip_id", "flight_bookings", ["trip_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("flight_bookings")
    op.drop_table("flight_booking_drafts")
    op.drop_table("travelers")
    op.drop_table("carts")
    op.drop_table("trips")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
