"""add_media_comments

Revision ID: 8d2e4b61c9a3
Revises: 3f1c2a9e7b40
Create Date: 2026-10-17 15:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8d2e4b61c9a3"
down_revision: Union[str, None] = "3f1c2a9e7b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("media_comments"):
        op.create_table(
            "media_comments",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("record_id", sa.String(), nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("user_name", sa.String(), nullable=False),
            sa.Column("user_image", sa.String(), nullable=True),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("likes", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(
                ["record_id"], ["media_records.id"], ondelete="CASCADE"
            ),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            op.f("ix_media_comments_record_id"), "media_comments", ["record_id"]
        )
        op.create_index(
            op.f("ix_media_comments_created_at"), "media_comments", ["created_at"]
        )


def downgrade() -> None:
    op.drop_index(op.f("ix_media_comments_created_at"), table_name="media_comments")
    op.drop_index(op.f("ix_media_comments_record_id"), table_name="media_comments")
    op.drop_table("media_comments")
