"""Initial marketplace schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17

Tables:
- users (Firebase uid as key, embedded membership, stats)
- articles (listings, owned by a user)
- service_providers (service listings with admin verification)
- categories (taxonomy, unique slug per type)
- ratings (unique per reviewer/target/type)
- processed_payments (webhook idempotency ledger)
- reconciliation_failures (webhook audit log)
- user_deletions (cascading delete progress)
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    # ── users ──
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255)),
        sa.Column("photo_url", sa.Text()),
        sa.Column("phone", sa.String(30)),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("disabled", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("membership_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("membership_plan", sa.String(20), nullable=False, server_default="annual"),
        sa.Column("membership_expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("membership_started_at", sa.DateTime(timezone=True)),
        sa.Column("membership_auto_renew", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("articles_published", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("ratings_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recommendations", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_membership_status", "users", ["membership_status"])

    # ── articles ──
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("seller_id", sa.String(128), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("subcategory", sa.String(50)),
        sa.Column("condition", sa.String(20), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("price_negotiable", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("metadata", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("images", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorites", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_articles_seller_id", "articles", ["seller_id"])
    op.create_index("ix_articles_category", "articles", ["category"])
    op.create_index("ix_articles_status", "articles", ["status"])

    # ── service_providers ──
    op.create_table(
        "service_providers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(128), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("business_name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("contact_phone", sa.String(30)),
        sa.Column("contact_email", sa.String(255)),
        sa.Column("contact_whatsapp", sa.String(30)),
        sa.Column("verification_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("verified_by", sa.String(128)),
        sa.Column("verified_at", sa.DateTime(timezone=True)),
        sa.Column("images", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("ratings_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recommendations", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_index("ix_service_providers_user_id", "service_providers", ["user_id"])
    op.create_index("ix_service_providers_category", "service_providers", ["category"])
    op.create_index("ix_service_providers_verification_status", "service_providers", ["verification_status"])

    # ── categories ──
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("icon", sa.String(20), nullable=False, server_default=""),
        sa.Column("color", sa.String(50), nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("type", "slug", name="uq_categories_type_slug"),
    )
    op.create_index("ix_categories_type", "categories", ["type"])

    # ── ratings ──
    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.String(128), nullable=False),
        sa.Column("target_owner_id", sa.String(128), nullable=False),
        sa.Column("reviewer_id", sa.String(128), nullable=False),
        sa.Column("reviewer_name", sa.String(255)),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text()),
        sa.Column("recommend", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("reviewer_id", "target_id", "target_type", name="uq_ratings_reviewer_target"),
        sa.CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),
    )
    op.create_index("ix_ratings_target_id", "ratings", ["target_id"])
    op.create_index("ix_ratings_target_owner_id", "ratings", ["target_owner_id"])
    op.create_index("ix_ratings_reviewer_id", "ratings", ["reviewer_id"])

    # ── processed_payments ──
    op.create_table(
        "processed_payments",
        sa.Column("payment_id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("provider", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("amount", sa.Integer()),
        sa.Column("currency", sa.String(3)),
        *_timestamps(),
    )
    op.create_index("ix_processed_payments_user_id", "processed_payments", ["user_id"])

    # ── reconciliation_failures ──
    op.create_table(
        "reconciliation_failures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("payment_id", sa.String(64), nullable=False),
        sa.Column("topic", sa.String(30), nullable=False, server_default="payment"),
        sa.Column("external_reference", sa.String(128)),
        sa.Column("error", sa.Text(), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_reconciliation_failures_payment_id", "reconciliation_failures", ["payment_id"])
    op.create_index("ix_reconciliation_failures_resolved", "reconciliation_failures", ["resolved"])

    # ── user_deletions ──
    op.create_table(
        "user_deletions",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("requested_by", sa.String(128)),
        sa.Column("status", sa.String(20), nullable=False, server_default="in_progress"),
        sa.Column("completed_steps", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("last_error", sa.Text()),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("user_deletions")
    op.drop_table("reconciliation_failures")
    op.drop_table("processed_payments")
    op.drop_table("ratings")
    op.drop_table("categories")
    op.drop_table("service_providers")
    op.drop_table("articles")
    op.drop_table("users")
