"""Initial schema: auth accounts, user profiles, works and the review workflow

Revision ID: 3c1f6a9d2b70
Revises:
Create Date: 2025-11-03 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f6a9d2b70'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the identity tables, then works and their child tables."""
    op.create_table(
        'auth_accounts',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('email_confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('user_metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_auth_accounts_id', 'auth_accounts', ['id'])
    op.create_index('ix_auth_accounts_email', 'auth_accounts', ['email'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='docente'),
        sa.Column('status', sa.String(), nullable=False, server_default='invited'),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('storage_used_mb', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_name', 'users', ['name'])
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_status', 'users', ['status'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'works',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title_it', sa.String(), nullable=False),
        sa.Column('title_en', sa.String(), nullable=True),
        sa.Column('description_it', sa.Text(), nullable=False),
        sa.Column('description_en', sa.Text(), nullable=True),
        sa.Column('class_name', sa.String(), nullable=False),
        sa.Column('teacher_name', sa.String(), nullable=False),
        sa.Column('school_year', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='draft'),
        sa.Column('license', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('edit_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_works_id', 'works', ['id'])
    op.create_index('ix_works_status', 'works', ['status'])
    op.create_index('ix_works_created_by', 'works', ['created_by'])

    op.create_table(
        'work_attachments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('work_id', sa.String(length=36), sa.ForeignKey('works.id'), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('file_size_bytes', sa.Integer(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=False),
        sa.Column('mime_type', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=False),
        sa.Column('thumbnail_path', sa.String(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_work_attachments_id', 'work_attachments', ['id'])
    op.create_index('ix_work_attachments_work_id', 'work_attachments', ['work_id'])

    op.create_table(
        'work_links',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('work_id', sa.String(length=36), sa.ForeignKey('works.id'), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('link_type', sa.String(), nullable=False, server_default='other'),
        sa.Column('custom_label', sa.String(), nullable=True),
        sa.Column('preview_title', sa.String(), nullable=True),
        sa.Column('preview_thumbnail_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_work_links_id', 'work_links', ['id'])
    op.create_index('ix_work_links_work_id', 'work_links', ['work_id'])

    op.create_table(
        'work_reviews',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('work_id', sa.String(length=36), sa.ForeignKey('works.id'), nullable=False),
        sa.Column('reviewer_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_work_reviews_id', 'work_reviews', ['id'])
    op.create_index('ix_work_reviews_work_id', 'work_reviews', ['work_id'])


def downgrade() -> None:
    """Drop every table, children first."""
    op.drop_table('work_reviews')
    op.drop_table('work_links')
    op.drop_table('work_attachments')
    op.drop_table('works')
    op.drop_table('users')
    op.drop_table('auth_accounts')
