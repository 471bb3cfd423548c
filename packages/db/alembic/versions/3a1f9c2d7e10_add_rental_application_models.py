# This project was developed with assistance from AI tools.
"""add rental application models

Revision ID: 3a1f9c2d7e10
Revises:
Create Date: 2026-10-02 09:12:41.503118

"""

import sqlalchemy as sa
from alembic import op

revision = "3a1f9c2d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(50), nullable=True),
        sa.Column("occupation", sa.String(200), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("native_language", sa.String(100), nullable=True),
        sa.Column("preferred_contact_method", sa.String(50), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("discoverable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "user_application_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("is_citizen", sa.Boolean(), nullable=True),
        sa.Column("visa_status", sa.String(100), nullable=True),
        sa.Column("employment_status", sa.String(20), nullable=True),
        sa.Column("employment_type", sa.String(100), nullable=True),
        sa.Column("income_source", sa.String(200), nullable=True),
        sa.Column("income_frequency", sa.String(50), nullable=True),
        sa.Column("income_amount", sa.Float(), nullable=True),
        sa.Column("student_status", sa.String(20), nullable=True),
        sa.Column("finance_support_type", sa.String(100), nullable=True),
        sa.Column("finance_support_details", sa.Text(), nullable=True),
        sa.Column("max_budget_per_week", sa.Numeric(10, 2), nullable=True),
        sa.Column("preferred_locality", sa.String(200), nullable=True),
        sa.Column("has_pets", sa.Boolean(), nullable=True),
        sa.Column("smoker", sa.Boolean(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(200), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(50), nullable=True),
        sa.Column("documents", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index(
        "ix_user_application_profiles_user_id", "user_application_profiles", ["user_id"]
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "units",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("listing_type", sa.String(20), nullable=False, server_default="private_room"),
        sa.Column("max_occupants", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("available_from", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_units_property_id", "units", ["property_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("applicant_id", sa.String(255), nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=True),
        sa.Column("application_type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="submitted"),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("move_in_date", sa.Date(), nullable=True),
        sa.Column("rental_duration", sa.Integer(), nullable=True),
        sa.Column("proposed_rent", sa.Numeric(10, 2), nullable=True),
        sa.Column("total_rent", sa.Numeric(10, 2), nullable=True),
        sa.Column("inclusions", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("occupancy_type", sa.String(20), nullable=False, server_default="single"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["applicant_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["unit_id"], ["units.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_applications_applicant_id", "applications", ["applicant_id"])
    op.create_index("ix_applications_property_id", "applications", ["property_id"])

    op.create_table(
        "application_snapshots",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("snapshot", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["application_id"], ["applications.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_application_snapshots_application_id", "application_snapshots", ["application_id"]
    )

    # Snapshots are append-only: block UPDATE at the database level too.
    op.execute(
        """
        CREATE OR REPLACE FUNCTION reject_snapshot_update() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'application_snapshots rows are immutable';
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER application_snapshots_no_update
        BEFORE UPDATE ON application_snapshots
        FOR EACH ROW EXECUTE FUNCTION reject_snapshot_update()
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS application_snapshots_no_update ON application_snapshots")
    op.execute("DROP FUNCTION IF EXISTS reject_snapshot_update()")
    op.drop_index("ix_application_snapshots_application_id", table_name="application_snapshots")
    op.drop_table("application_snapshots")
    op.drop_index("ix_applications_property_id", table_name="applications")
    op.drop_index("ix_applications_applicant_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_units_property_id", table_name="units")
    op.drop_table("units")
    op.drop_table("properties")
    op.drop_index(
        "ix_user_application_profiles_user_id", table_name="user_application_profiles"
    )
    op.drop_table("user_application_profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
