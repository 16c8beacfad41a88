"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False, unique=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("reset_password_token", sa.String(length=64), nullable=True),
        sa.Column("reset_password_expire", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])
    op.create_index("ix_users_reset_password_token", "users", ["reset_password_token"])

    op.create_table(
        "bootcamps",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        *_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
        sa.Column("slug", sa.String(length=80), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("website", sa.String(length=300), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("address", sa.String(length=300), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("formatted_address", sa.String(length=300), nullable=True),
        sa.Column("street", sa.String(length=200), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("zipcode", sa.String(length=20), nullable=True),
        sa.Column("country", sa.String(length=10), nullable=True),
        sa.Column("careers", sa.JSON(), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=True),
        sa.Column("average_cost", sa.Float(), nullable=True),
        sa.Column("photo", sa.String(length=200), nullable=False, server_default="no-photo.jpg"),
        sa.Column("housing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("job_assistance", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("job_guarantee", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("accept_gi", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_bootcamps_created_at", "bootcamps", ["created_at"])
    op.create_index("ix_bootcamps_user_id", "bootcamps", ["user_id"])
    op.create_index("ix_bootcamps_slug", "bootcamps", ["slug"])

    op.create_table(
        "courses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        *_timestamps(),
        sa.Column(
            "bootcamp_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bootcamps.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("weeks", sa.Integer(), nullable=False),
        sa.Column("tuition", sa.Float(), nullable=False),
        sa.Column("minimum_skill", sa.String(length=20), nullable=False),
        sa.Column("scholarship_available", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_courses_created_at", "courses", ["created_at"])
    op.create_index("ix_courses_bootcamp_id", "courses", ["bootcamp_id"])
    op.create_index("ix_courses_user_id", "courses", ["user_id"])

    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        *_timestamps(),
        sa.Column(
            "bootcamp_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bootcamps.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.UniqueConstraint("bootcamp_id", "user_id", name="uq_reviews_bootcamp_user"),
    )
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])
    op.create_index("ix_reviews_bootcamp_id", "reviews", ["bootcamp_id"])
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])

def downgrade():
    op.drop_table("reviews")
    op.drop_table("courses")
    op.drop_table("bootcamps")
    op.drop_table("users")
