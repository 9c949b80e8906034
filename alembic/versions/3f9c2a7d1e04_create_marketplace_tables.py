"""create_marketplace_tables

Creates the users, jobs, job_applications, clips, payments and reviews
tables with their enum types.

Revision ID: 3f9c2a7d1e04
Revises:
Create Date: 2026-10-18 09:20:11.402613

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1e04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('creator', 'clipper', name='user_role')
job_difficulty = sa.Enum('easy', 'medium', 'hard', name='job_difficulty')
job_status = sa.Enum('active', 'in_progress', 'completed', 'cancelled', name='job_status')
application_status = sa.Enum('pending', 'accepted', 'rejected', name='application_status')
clip_status = sa.Enum('submitted', 'approved', 'rejected', 'live', name='clip_status')
payment_status = sa.Enum('pending', 'paid', 'cancelled', name='payment_status')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    """
    Create all marketplace tables.
    """
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('rating', sa.Numeric(precision=3, scale=2), nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('total_jobs', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('creator_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('video_url', sa.Text(), nullable=False),
        sa.Column('video_duration', sa.Integer(), nullable=False),
        sa.Column('budget', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=False),
        sa.Column('difficulty', job_difficulty, nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('status', job_status, nullable=False, server_default='active'),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('max_clips', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('average_views', sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['creator_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_creator_id', 'jobs', ['creator_id'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])
    op.create_index('ix_jobs_created_at', 'jobs', ['created_at'])

    op.create_table(
        'job_applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('clipper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('proposed_timeline', sa.String(length=100), nullable=True),
        sa.Column('status', application_status, nullable=False, server_default='pending'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['clipper_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('job_id', 'clipper_id', name='uq_job_applications_job_clipper'),
    )
    op.create_index('ix_job_applications_job_id', 'job_applications', ['job_id'])
    op.create_index('ix_job_applications_clipper_id', 'job_applications', ['clipper_id'])

    op.create_table(
        'clips',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('clipper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('video_url', sa.Text(), nullable=False),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Integer(), nullable=False),
        sa.Column('end_time', sa.Integer(), nullable=False),
        sa.Column('status', clip_status, nullable=False, server_default='submitted'),
        sa.Column('platform', sa.String(length=50), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('engagement', sa.Numeric(precision=5, scale=2), nullable=False, server_default='0'),
        sa.Column('earnings', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('feedback', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['clipper_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_clips_job_id', 'clips', ['job_id'])
    op.create_index('ix_clips_clipper_id', 'clips', ['clipper_id'])
    op.create_index('ix_clips_status', 'clips', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('clip_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('creator_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('clipper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', payment_status, nullable=False, server_default='pending'),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['clip_id'], ['clips.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['creator_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['clipper_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('clip_id'),
    )
    op.create_index('ix_payments_job_id', 'payments', ['job_id'])
    op.create_index('ix_payments_creator_id', 'payments', ['creator_id'])
    op.create_index('ix_payments_clipper_id', 'payments', ['clipper_id'])
    op.create_index('ix_payments_status', 'payments', ['status'])

    op.create_table(
        'reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reviewer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reviewee_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewee_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('reviewer_id', 'reviewee_id', 'job_id', name='uq_reviews_reviewer_reviewee_job'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
    )
    op.create_index('ix_reviews_reviewee_id', 'reviews', ['reviewee_id'])


def downgrade() -> None:
    """
    Drop all marketplace tables and enum types.
    """
    op.drop_table('reviews')
    op.drop_table('payments')
    op.drop_table('clips')
    op.drop_table('job_applications')
    op.drop_table('jobs')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (payment_status, clip_status, application_status, job_status, job_difficulty, user_role):
        enum_type.drop(bind, checkfirst=True)
