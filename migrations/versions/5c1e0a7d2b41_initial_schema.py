"""initial_schema

Create the RailCommand tables: identity, projects, memberships, the
construction record families and the activity log.

Revision ID: 5c1e0a7d2b41
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = "5c1e0a7d2b41"
down_revision = None
branch_labels = None
depends_on = None


def _created_at():
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    if "organizations" not in existing_tables:
        op.create_table(
            "organizations",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("type", sa.String(length=30), nullable=False, server_default="contractor"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )

    if "profiles" not in existing_tables:
        op.create_table(
            "profiles",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("full_name", sa.String(length=200), nullable=False, server_default=""),
            sa.Column("phone", sa.String(length=50), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=False, server_default="viewer"),
            sa.Column("organization_id", sa.Integer(), nullable=True),
            sa.Column("avatar_url", sa.String(length=500), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("email"),
        )

    if "projects" not in existing_tables:
        op.create_table(
            "projects",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
            sa.Column("start_date", sa.Date(), nullable=True),
            sa.Column("target_end_date", sa.Date(), nullable=True),
            sa.Column("actual_end_date", sa.Date(), nullable=True),
            sa.Column("budget_total", sa.Numeric(14, 2), nullable=False, server_default="0"),
            sa.Column("budget_spent", sa.Numeric(14, 2), nullable=False, server_default="0"),
            sa.Column("location", sa.String(length=300), nullable=True),
            sa.Column("client", sa.String(length=200), nullable=True),
            sa.Column("created_by", sa.Integer(), nullable=True),
            _created_at(),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )

    if "project_members" not in existing_tables:
        op.create_table(
            "project_members",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("profile_id", sa.Integer(), nullable=False),
            sa.Column("project_role", sa.String(length=30), nullable=False),
            sa.Column("can_edit", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("added_at", sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("project_id", "profile_id", name="uq_project_member"),
        )
        op.create_index("ix_project_members_profile", "project_members", ["profile_id"])

    if "milestones" not in existing_tables:
        op.create_table(
            "milestones",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("target_date", sa.Date(), nullable=True),
            sa.Column("actual_date", sa.Date(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="not_started"),
            sa.Column("percent_complete", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("budget_planned", sa.Numeric(14, 2), nullable=False, server_default="0"),
            sa.Column("budget_actual", sa.Numeric(14, 2), nullable=False, server_default="0"),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="1"),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.CheckConstraint("percent_complete BETWEEN 0 AND 100", name="ck_milestones_percent"),
        )
        op.create_index("ix_milestones_project_id", "milestones", ["project_id"])

    if "submittals" not in existing_tables:
        op.create_table(
            "submittals",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("number", sa.String(length=20), nullable=False),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("spec_section", sa.String(length=200), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
            sa.Column("submitted_by", sa.Integer(), nullable=True),
            sa.Column("reviewed_by", sa.Integer(), nullable=True),
            sa.Column("submit_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("due_date", sa.Date(), nullable=True),
            sa.Column("review_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("review_notes", sa.Text(), nullable=True),
            sa.Column("milestone_id", sa.Integer(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["submitted_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["reviewed_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["milestone_id"], ["milestones.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("project_id", "number", name="uq_submittals_project_number"),
        )
        op.create_index("ix_submittals_project_id", "submittals", ["project_id"])

    if "rfis" not in existing_tables:
        op.create_table(
            "rfis",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("number", sa.String(length=20), nullable=False),
            sa.Column("subject", sa.String(length=300), nullable=False),
            sa.Column("question", sa.Text(), nullable=False),
            sa.Column("answer", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
            sa.Column("priority", sa.String(length=20), nullable=False, server_default="medium"),
            sa.Column("submitted_by", sa.Integer(), nullable=True),
            sa.Column("assigned_to", sa.Integer(), nullable=True),
            sa.Column("submit_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("due_date", sa.Date(), nullable=True),
            sa.Column("response_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("milestone_id", sa.Integer(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["submitted_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["assigned_to"], ["profiles.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["milestone_id"], ["milestones.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("project_id", "number", name="uq_rfis_project_number"),
        )
        op.create_index("ix_rfis_project_id", "rfis", ["project_id"])

    if "rfi_responses" not in existing_tables:
        op.create_table(
            "rfi_responses",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("rfi_id", sa.Integer(), nullable=False),
            sa.Column("author_id", sa.Integer(), nullable=True),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("is_official_response", sa.Boolean(), nullable=False, server_default=sa.false()),
            _created_at(),
            sa.ForeignKeyConstraint(["rfi_id"], ["rfis.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["author_id"], ["profiles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_rfi_responses_rfi_id", "rfi_responses", ["rfi_id"])

    if "daily_logs" not in existing_tables:
        op.create_table(
            "daily_logs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("log_date", sa.Date(), nullable=False),
            sa.Column("created_by", sa.Integer(), nullable=True),
            sa.Column("weather_temp", sa.Float(), nullable=True),
            sa.Column("weather_conditions", sa.String(length=100), nullable=True),
            sa.Column("weather_wind", sa.String(length=100), nullable=True),
            sa.Column("work_summary", sa.Text(), nullable=False),
            sa.Column("safety_notes", sa.Text(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_daily_logs_project_id", "daily_logs", ["project_id"])
        op.create_index("ix_daily_logs_project_date", "daily_logs", ["project_id", "log_date"])

        op.create_table(
            "daily_log_personnel",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("daily_log_id", sa.Integer(), nullable=False),
            sa.Column("role", sa.String(length=100), nullable=False),
            sa.Column("headcount", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("company", sa.String(length=200), nullable=True),
            sa.ForeignKeyConstraint(["daily_log_id"], ["daily_logs.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_daily_log_personnel_daily_log_id", "daily_log_personnel", ["daily_log_id"])

        op.create_table(
            "daily_log_equipment",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("daily_log_id", sa.Integer(), nullable=False),
            sa.Column("equipment_type", sa.String(length=100), nullable=False),
            sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["daily_log_id"], ["daily_logs.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_daily_log_equipment_daily_log_id", "daily_log_equipment", ["daily_log_id"])

        op.create_table(
            "daily_log_work_items",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("daily_log_id", sa.Integer(), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("quantity", sa.Float(), nullable=False, server_default="0"),
            sa.Column("unit", sa.String(length=30), nullable=True),
            sa.Column("location", sa.String(length=300), nullable=True),
            sa.ForeignKeyConstraint(["daily_log_id"], ["daily_logs.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_daily_log_work_items_daily_log_id", "daily_log_work_items", ["daily_log_id"])

    if "punch_list_items" not in existing_tables:
        op.create_table(
            "punch_list_items",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("number", sa.String(length=20), nullable=False),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("location", sa.String(length=300), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
            sa.Column("priority", sa.String(length=20), nullable=False, server_default="medium"),
            sa.Column("assigned_to", sa.Integer(), nullable=True),
            sa.Column("created_by", sa.Integer(), nullable=True),
            sa.Column("due_date", sa.Date(), nullable=True),
            sa.Column("resolved_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("verified_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("resolution_notes", sa.Text(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["assigned_to"], ["profiles.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("project_id", "number", name="uq_punch_list_project_number"),
        )
        op.create_index("ix_punch_list_items_project_id", "punch_list_items", ["project_id"])

    if "activity_log" not in existing_tables:
        op.create_table(
            "activity_log",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("entity_type", sa.String(length=30), nullable=False),
            sa.Column("entity_id", sa.String(length=36), nullable=False),
            sa.Column("action", sa.String(length=30), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("performed_by", sa.Integer(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["performed_by"], ["profiles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("idx_activity_project_created", "activity_log", ["project_id", "created_at"])
        op.create_index("idx_activity_entity", "activity_log", ["entity_type", "entity_id"])
        op.create_index("ix_activity_log_performed_by", "activity_log", ["performed_by"])


def downgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    for table in (
        "activity_log",
        "punch_list_items",
        "daily_log_work_items",
        "daily_log_equipment",
        "daily_log_personnel",
        "daily_logs",
        "rfi_responses",
        "rfis",
        "submittals",
        "milestones",
        "project_members",
        "projects",
        "profiles",
        "organizations",
    ):
        if table in existing_tables:
            op.drop_table(table)
