"""Initial volunteer hours schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

Volunteers, role definitions and assignments, event categories, events and
event participation with the hour approval columns.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


branch = sa.Enum("EXCS", "CMPN", "IT", "BIO-MED", "EXTC", name="branch")
study_year = sa.Enum("FE", "SE", "TE", name="study_year")
gender = sa.Enum("M", "F", "Prefer not to say", name="gender")
event_status = sa.Enum(
    "planned",
    "registration_open",
    "registration_closed",
    "ongoing",
    "completed",
    "cancelled",
    name="event_status",
)
participation_status = sa.Enum(
    "registered",
    "present",
    "absent",
    "partially_present",
    "excused",
    name="participation_status",
)
approval_status = sa.Enum("pending", "approved", "rejected", name="approval_status")


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "volunteers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("auth_user_id", sa.Uuid(), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("roll_number", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("branch", branch, nullable=False),
        sa.Column("year", study_year, nullable=False),
        sa.Column("phone_no", sa.String(10), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("gender", gender, nullable=True),
        sa.Column("nss_join_year", sa.Integer(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("profile_pic", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_volunteers"),
        sa.UniqueConstraint("roll_number", name="uq_volunteers_roll_number"),
        sa.UniqueConstraint("email", name="uq_volunteers_email"),
    )
    op.create_index(
        "ix_volunteers_auth_user_id", "volunteers", ["auth_user_id"], unique=True
    )
    op.create_index("ix_volunteers_is_active", "volunteers", ["is_active"])

    op.create_table(
        "role_definitions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("role_name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("permissions", postgresql.JSONB(), nullable=False),
        sa.Column("hierarchy_level", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_role_definitions"),
        sa.UniqueConstraint("role_name", name="uq_role_definitions_role_name"),
    )
    op.create_index(
        "ix_role_definitions_is_active", "role_definitions", ["is_active"]
    )

    op.create_table(
        "user_roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("volunteer_id", sa.Uuid(), nullable=False),
        sa.Column("role_definition_id", sa.Uuid(), nullable=False),
        sa.Column("assigned_by", sa.Uuid(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_user_roles"),
        sa.ForeignKeyConstraint(
            ["volunteer_id"],
            ["volunteers.id"],
            name="fk_user_roles_volunteer_id_volunteers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["role_definition_id"],
            ["role_definitions.id"],
            name="fk_user_roles_role_definition_id_role_definitions",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["assigned_by"],
            ["volunteers.id"],
            name="fk_user_roles_assigned_by_volunteers",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_user_roles_is_active", "user_roles", ["is_active"])

    op.create_table(
        "event_categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("color_hex", sa.String(7), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_event_categories"),
        sa.UniqueConstraint(
            "category_name", name="uq_event_categories_category_name"
        ),
        sa.UniqueConstraint("code", name="uq_event_categories_code"),
    )
    op.create_index(
        "ix_event_categories_is_active", "event_categories", ["is_active"]
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("declared_hours", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("min_participants", sa.Integer(), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("event_status", event_status, nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("registration_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by_volunteer_id", sa.Uuid(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["event_categories.id"],
            name="fk_events_category_id_event_categories",
        ),
        sa.ForeignKeyConstraint(
            ["created_by_volunteer_id"],
            ["volunteers.id"],
            name="fk_events_created_by_volunteer_id_volunteers",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint(
            "declared_hours >= 0 AND declared_hours <= 100",
            name="ck_events_declared_hours_range",
        ),
    )
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_is_active", "events", ["is_active"])

    op.create_table(
        "event_participation",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("volunteer_id", sa.Uuid(), nullable=False),
        sa.Column("hours_attended", sa.Integer(), nullable=False),
        sa.Column("declared_hours", sa.Integer(), nullable=True),
        sa.Column("approved_hours", sa.Integer(), nullable=True),
        sa.Column("participation_status", participation_status, nullable=False),
        sa.Column("registration_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("attendance_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("feedback", sa.String(2000), nullable=True),
        sa.Column("recorded_by_volunteer_id", sa.Uuid(), nullable=True),
        sa.Column("approval_status", approval_status, nullable=False),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_notes", sa.String(500), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_event_participation"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["events.id"],
            name="fk_event_participation_event_id_events",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["volunteer_id"],
            ["volunteers.id"],
            name="fk_event_participation_volunteer_id_volunteers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["recorded_by_volunteer_id"],
            ["volunteers.id"],
            name="fk_event_participation_recorded_by_volunteer_id_volunteers",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["approved_by"],
            ["volunteers.id"],
            name="fk_event_participation_approved_by_volunteers",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint(
            "event_id", "volunteer_id", name="uq_event_participation_event_volunteer"
        ),
        sa.CheckConstraint(
            "hours_attended >= 0 AND hours_attended <= 24",
            name="ck_event_participation_hours_attended_range",
        ),
    )
    op.create_index(
        "ix_event_participation_event_id", "event_participation", ["event_id"]
    )
    op.create_index(
        "ix_event_participation_volunteer_id", "event_participation", ["volunteer_id"]
    )
    op.create_index(
        "ix_event_participation_approval_status",
        "event_participation",
        ["approval_status"],
    )


def downgrade() -> None:
    op.drop_table("event_participation")
    op.drop_table("events")
    op.drop_table("event_categories")
    op.drop_table("user_roles")
    op.drop_table("role_definitions")
    op.drop_table("volunteers")

    bind = op.get_bind()
    for enum_type in (
        approval_status,
        participation_status,
        event_status,
        gender,
        study_year,
        branch,
    ):
        enum_type.drop(bind, checkfirst=True)
