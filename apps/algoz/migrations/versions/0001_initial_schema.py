"""initial schema: users, codeforces profiles, analysis sessions, study tables"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("profile_picture", sa.String(length=2048), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "codeforces_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("handle", sa.String(length=64), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("max_rating", sa.Integer(), nullable=True),
        sa.Column("rank", sa.String(length=64), nullable=True),
        sa.Column("max_rank", sa.String(length=64), nullable=True),
        sa.Column("problems_solved", sa.Integer(), nullable=True),
        sa.Column("contests_participated", sa.Integer(), nullable=True),
        sa.Column("profile_data", sa.JSON(), nullable=True),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_codeforces_profiles_user_id", "codeforces_profiles", ["user_id"], unique=True
    )
    op.create_index("ix_codeforces_profiles_handle", "codeforces_profiles", ["handle"], unique=True)

    op.create_table(
        "debug_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("problem_statement", sa.Text(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=32), nullable=False),
        sa.Column("ai_response", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("problem_id", sa.String(length=64), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_debug_sessions_user_id", "debug_sessions", ["user_id"])

    op.create_table(
        "explain_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("problem_statement", sa.Text(), nullable=False),
        sa.Column("solution_code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=32), nullable=False),
        sa.Column("ai_response", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("problem_id", sa.String(length=64), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_explain_sessions_user_id", "explain_sessions", ["user_id"])

    op.create_table(
        "study_routines",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("current_rating", sa.Integer(), nullable=True),
        sa.Column("target_rating", sa.Integer(), nullable=True),
        sa.Column("study_hours_per_week", sa.Integer(), nullable=True),
        sa.Column("contest_participation", sa.String(length=32), nullable=True),
        sa.Column("topics", sa.JSON(), nullable=True),
        sa.Column("schedule", sa.JSON(), nullable=True),
        sa.Column("answers", sa.JSON(), nullable=True),
        sa.Column("routine", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_study_routines_user_id", "study_routines", ["user_id"])

    op.create_table(
        "problem_recommendations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("problem_id", sa.String(length=64), nullable=False),
        sa.Column("problem_title", sa.String(length=512), nullable=False),
        sa.Column("problem_url", sa.String(length=2048), nullable=False),
        sa.Column("difficulty", sa.Integer(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("source", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("solved_on", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_problem_recommendations_user_id", "problem_recommendations", ["user_id"]
    )
    op.create_index(
        "ix_problem_recommendations_user_problem",
        "problem_recommendations",
        ["user_id", "problem_id"],
        unique=True,
    )

    op.create_table(
        "learning_resources",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("resource_type", sa.String(length=32), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("difficulty", sa.String(length=32), nullable=True),
        sa.Column("source", sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_learning_resources_url", "learning_resources", ["url"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_learning_resources_url", table_name="learning_resources")
    op.drop_table("learning_resources")
    op.drop_index("ix_problem_recommendations_user_problem", table_name="problem_recommendations")
    op.drop_index("ix_problem_recommendations_user_id", table_name="problem_recommendations")
    op.drop_table("problem_recommendations")
    op.drop_index("ix_study_routines_user_id", table_name="study_routines")
    op.drop_table("study_routines")
    op.drop_index("ix_explain_sessions_user_id", table_name="explain_sessions")
    op.drop_table("explain_sessions")
    op.drop_index("ix_debug_sessions_user_id", table_name="debug_sessions")
    op.drop_table("debug_sessions")
    op.drop_index("ix_codeforces_profiles_handle", table_name="codeforces_profiles")
    op.drop_index("ix_codeforces_profiles_user_id", table_name="codeforces_profiles")
    op.drop_table("codeforces_profiles")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
