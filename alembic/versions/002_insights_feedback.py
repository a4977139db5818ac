"""Traveler insights and feedback

Revision ID: 002_insights_feedback
Revises: 001_initial_schema
Create Date: 2026-10-19

Creates insights and feedback.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "002_insights_feedback"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

insight_category = postgresql.ENUM(
    "food",
    "transport",
    "neighborhoods",
    "timing",
    "hidden_gem",
    "avoid",
    "other",
    name="insight_category",
    create_type=False,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    """Create insights and feedback."""
    insight_category.create(op.get_bind(), checkfirst=True)

    # Insights
    op.create_table(
        "insights",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("category", insight_category, nullable=False),
        sa.Column("verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("likes", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_insights"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_insights_user_id_users", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_insights_user_id", "insights", ["user_id"])
    op.create_index("ix_insights_destination", "insights", ["destination"])

    # Feedback
    op.create_table(
        "feedback",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_feedback"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_feedback_user_id_users", ondelete="SET NULL"
        ),
    )
    op.create_index("ix_feedback_user_id", "feedback", ["user_id"])


def downgrade() -> None:
    """Drop insights and feedback."""
    op.drop_table("feedback")
    op.drop_table("insights")
    insight_category.drop(op.get_bind(), checkfirst=True)
