"""add forms, form blocks, block interactions/logics and form sessions tables

Revision ID: 8f3b2d6e5a47
Revises: 4c1e7a9d2b10
Create Date: 2026-09-01 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "8f3b2d6e5a47"
down_revision: Union[str, None] = "4c1e7a9d2b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _flag(name: str) -> sa.Column:
    return sa.Column(name, sa.Boolean(), server_default="false", nullable=False)


def upgrade() -> None:
    op.create_table(
        "forms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("team_id", sa.UUID(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("language", sa.String(length=10), nullable=True),
        sa.Column("avatar_path", sa.String(length=500), nullable=True),
        sa.Column("background_path", sa.String(length=500), nullable=True),
        sa.Column("brand_color", sa.String(length=20), nullable=True),
        sa.Column("text_color", sa.String(length=20), nullable=True),
        sa.Column("background_color", sa.String(length=20), nullable=True),
        sa.Column("eoc_text", sa.Text(), nullable=True),
        sa.Column("eoc_headline", sa.String(length=255), nullable=True),
        sa.Column("data_retention_days", sa.Integer(), nullable=True),
        _flag("is_auto_delete_enabled"),
        sa.Column("legal_notice_link", sa.String(length=500), nullable=True),
        sa.Column("privacy_link", sa.String(length=500), nullable=True),
        sa.Column("cta_label", sa.String(length=255), nullable=True),
        sa.Column("cta_link", sa.String(length=500), nullable=True),
        _flag("cta_append_params"),
        sa.Column("cta_redirect_delay", sa.Integer(), server_default="0", nullable=False),
        _flag("use_cta_redirect"),
        _flag("cta_append_session_id"),
        sa.Column("linkedin", sa.String(length=500), nullable=True),
        sa.Column("github", sa.String(length=500), nullable=True),
        sa.Column("instagram", sa.String(length=500), nullable=True),
        sa.Column("facebook", sa.String(length=500), nullable=True),
        sa.Column("twitter", sa.String(length=500), nullable=True),
        _flag("show_cta_link"),
        _flag("show_social_links"),
        _flag("use_brighter_inputs"),
        _flag("show_form_progress"),
        _flag("is_notification_via_mail"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
    )
    op.create_index("ix_forms_user_id", "forms", ["user_id"], unique=False)
    op.create_index("ix_forms_team_id", "forms", ["team_id"], unique=False)
    op.create_index("ix_forms_published_at", "forms", ["published_at"], unique=False)
    op.create_index("ix_forms_deleted_at", "forms", ["deleted_at"], unique=False)

    op.create_table(
        "form_blocks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(length=64), nullable=False),
        sa.Column("form_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("parent_block", sa.String(length=64), nullable=True),
        sa.Column("sequence", sa.Integer(), server_default="0", nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        _flag("is_required"),
        _flag("is_disabled"),
        sa.Column("options", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_form_blocks_form_id", "form_blocks", ["form_id"], unique=False)
    op.create_index("ix_form_blocks_form_sequence", "form_blocks", ["form_id", "sequence"], unique=False)

    op.create_table(
        "form_block_interactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(length=64), nullable=False),
        sa.Column("form_block_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=True),
        sa.Column("reply", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("sequence", sa.Integer(), server_default="0", nullable=False),
        _flag("is_disabled"),
        sa.Column("options", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["form_block_id"], ["form_blocks.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_form_block_interactions_block_id", "form_block_interactions", ["form_block_id"], unique=False
    )

    op.create_table(
        "form_block_logics",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(length=64), nullable=False),
        sa.Column("form_block_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("evaluate", sa.String(length=10), server_default="and", nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column("action_target", sa.String(length=64), nullable=True),
        sa.Column("conditions", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["form_block_id"], ["form_blocks.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_form_block_logics_block_id", "form_block_logics", ["form_block_id"], unique=False)

    op.create_table(
        "form_sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("form_id", sa.Integer(), nullable=False),
        _flag("is_completed"),
        sa.Column("params", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_form_sessions_form_id", "form_sessions", ["form_id"], unique=False)
    op.create_index("ix_form_sessions_token", "form_sessions", ["token"], unique=True)

    op.create_table(
        "form_session_responses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("form_session_id", sa.Integer(), nullable=False),
        sa.Column("form_block_id", sa.Integer(), nullable=False),
        sa.Column("form_block_interaction_id", sa.Integer(), nullable=True),
        sa.Column("value", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["form_session_id"], ["form_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["form_block_id"], ["form_blocks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["form_block_interaction_id"], ["form_block_interactions.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_form_session_responses_session_id", "form_session_responses", ["form_session_id"], unique=False
    )
    op.create_index(
        "ix_form_session_responses_block_id", "form_session_responses", ["form_block_id"], unique=False
    )
    op.create_index(
        "ix_form_session_responses_created_at", "form_session_responses", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_form_session_responses_created_at", table_name="form_session_responses")
    op.drop_index("ix_form_session_responses_block_id", table_name="form_session_responses")
    op.drop_index("ix_form_session_responses_session_id", table_name="form_session_responses")
    op.drop_table("form_session_responses")

    op.drop_index("ix_form_sessions_token", table_name="form_sessions")
    op.drop_index("ix_form_sessions_form_id", table_name="form_sessions")
    op.drop_table("form_sessions")

    op.drop_index("ix_form_block_logics_block_id", table_name="form_block_logics")
    op.drop_table("form_block_logics")

    op.drop_index("ix_form_block_interactions_block_id", table_name="form_block_interactions")
    op.drop_table("form_block_interactions")

    op.drop_index("ix_form_blocks_form_sequence", table_name="form_blocks")
    op.drop_index("ix_form_blocks_form_id", table_name="form_blocks")
    op.drop_table("form_blocks")

    op.drop_index("ix_forms_deleted_at", table_name="forms")
    op.drop_index("ix_forms_published_at", table_name="forms")
    op.drop_index("ix_forms_team_id", table_name="forms")
    op.drop_index("ix_forms_user_id", table_name="forms")
    op.drop_table("forms")
