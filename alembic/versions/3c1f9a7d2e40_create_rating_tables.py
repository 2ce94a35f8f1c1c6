"""create questions, ratings and subjects tables

Revision ID: 3c1f9a7d2e40
Revises:
Create Date: 2026-10-19 09:12:44.518302

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2e40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

letter_grade = sa.Enum("A", "B", "C", "D", "F", "UNKNOWN", name="lettergrade")
subject_kind = sa.Enum("MOVIE", "SHOW", name="subjectkind")


def upgrade() -> None:
    """Create the question catalog, per-user ratings and subject summaries."""
    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("header", sa.String(length=255), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("helptext", sa.Text(), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=True),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("weight IS NULL OR weight >= 0", name="ck_questions_weight"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_questions_is_active", "questions", ["is_active"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("review", sa.Text(), nullable=False),
        sa.Column("users_rating", letter_grade, nullable=True),
        sa.Column("raw_args", sa.JSON(), nullable=True),
        sa.Column("raw_args_total", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("subject_id", "user_id", name="uq_ratings_subject_user"),
    )
    op.create_index("ix_ratings_id", "ratings", ["id"])
    # Sample lookup: completed ratings of a subject by descending total
    op.create_index(
        "ix_ratings_subject_total", "ratings", ["subject_id", "raw_args_total"]
    )

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.String(length=64), nullable=False),
        sa.Column("kind", subject_kind, nullable=False),
        sa.Column("rating", letter_grade, nullable=False),
        sa.Column("rated_counter", sa.Integer(), nullable=False),
        sa.Column("reviews_counter", sa.Integer(), nullable=False),
        sa.Column("rating_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("subject_id"),
    )
    op.create_index("ix_subjects_id", "subjects", ["id"])
    op.create_index("ix_subjects_kind", "subjects", ["kind"])
    op.create_index("ix_subjects_rating_updated_at", "subjects", ["rating_updated_at"])


def downgrade() -> None:
    """Drop subjects, ratings and questions tables."""
    op.drop_index("ix_subjects_rating_updated_at", table_name="subjects")
    op.drop_index("ix_subjects_kind", table_name="subjects")
    op.drop_index("ix_subjects_id", table_name="subjects")
    op.drop_table("subjects")

    op.drop_index("ix_ratings_subject_total", table_name="ratings")
    op.drop_index("ix_ratings_id", table_name="ratings")
    op.drop_table("ratings")

    op.drop_index("ix_questions_is_active", table_name="questions")
    op.drop_table("questions")

    letter_grade.drop(op.get_bind(), checkfirst=True)
    subject_kind.drop(op.get_bind(), checkfirst=True)
