"""create_media_tables

Revision ID: 3f1c2a9e7b40
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9e7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Skip tables that auto_create_tables already made.
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("media_records"):
        op.create_table(
            "media_records",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("content_type", sa.String(), nullable=False),
            sa.Column("owner_id", sa.String(), nullable=True),
            sa.Column("title", sa.String(), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("tags", sa.JSON(), nullable=False),
            sa.Column("public_id", sa.String(), nullable=False),
            sa.Column("url", sa.String(), nullable=False),
            sa.Column("resource_type", sa.String(), nullable=False),
            sa.Column("format", sa.String(), nullable=True),
            sa.Column("duration", sa.Float(), nullable=True),
            sa.Column("thumbnail_url", sa.String(), nullable=True),
            sa.Column("thumbnail_public_id", sa.String(), nullable=True),
            sa.Column("views", sa.Integer(), nullable=False),
            sa.Column("likes_count", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            op.f("ix_media_records_content_type"), "media_records", ["content_type"]
        )
        op.create_index(op.f("ix_media_records_owner_id"), "media_records", ["owner_id"])
        op.create_index(
            op.f("ix_media_records_created_at"), "media_records", ["created_at"]
        )

    if not insp.has_table("media_likes"):
        op.create_table(
            "media_likes",
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("record_id", sa.String(), nullable=False),
            sa.Column("user_id", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(
                ["record_id"], ["media_records.id"], ondelete="CASCADE"
            ),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("record_id", "user_id", name="uq_media_like_user"),
        )
        op.create_index(op.f("ix_media_likes_record_id"), "media_likes", ["record_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_media_likes_record_id"), table_name="media_likes")
    op.drop_table("media_likes")
    op.drop_index(op.f("ix_media_records_created_at"), table_name="media_records")
    op.drop_index(op.f("ix_media_records_owner_id"), table_name="media_records")
    op.drop_index(op.f("ix_media_records_content_type"), table_name="media_records")
    op.drop_table("media_records")
