"""Initial Family Hub schema

Revision ID: 3f1a6c2e9b47
Revises:
Create Date: 2026-10-17

Creates users, families, tasks, events, achievements, notifications and
the server-side sessions table. Enum columns are stored as VARCHAR by
value; JSON columns become JSONB on PostgreSQL.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1a6c2e9b47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json() -> sa.types.TypeEngine:
    return sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _enum(*values: str, name: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, create_constraint=False)


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('role', _enum('parent', 'spouse', 'child', name='role'), nullable=False),
        sa.Column('family_id', sa.String(length=64), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('preferences', _json(), nullable=True),
        sa.Column('gamification_points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index('idx_user_family', ['family_id'], unique=False)
        batch_op.create_index('idx_user_role', ['role'], unique=False)

    op.create_table('families',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('quadrant', sa.Integer(), nullable=False),
        sa.Column('status', _enum('not_started', 'in_progress', 'blocked', 'completed', name='taskstatus'), nullable=False),
        sa.Column('priority', _enum('low', 'medium', 'high', 'urgent', name='taskpriority'), nullable=False),
        sa.Column('assignee_id', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('family_id', sa.String(length=64), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurring_pattern', _json(), nullable=True),
        sa.Column('attachments', _json(), nullable=True),
        sa.Column('subtasks', _json(), nullable=True),
        sa.Column('tags', _json(), nullable=True),
        sa.Column('estimated_duration', sa.Integer(), nullable=True),
        sa.Column('actual_duration', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quadrant BETWEEN 1 AND 4', name='ck_task_quadrant'),
        sa.CheckConstraint('points >= 0', name='ck_task_points'),
        sa.ForeignKeyConstraint(['assignee_id'], ['users.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['family_id'], ['families.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('tasks', schema=None) as batch_op:
        batch_op.create_index('idx_task_family_created', ['family_id', 'created_at'], unique=False)
        batch_op.create_index('idx_task_family_quadrant', ['family_id', 'quadrant'], unique=False)
        batch_op.create_index('idx_task_assignee', ['assignee_id'], unique=False)
        batch_op.create_index('idx_task_status', ['status'], unique=False)

    op.create_table('events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('category', _enum('work', 'school', 'social', 'healthcare', 'travel', 'official', 'family', 'sports', name='eventcategory'), nullable=False),
        sa.Column('attendees', _json(), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('family_id', sa.String(length=64), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurring_pattern', _json(), nullable=True),
        sa.Column('reminders', _json(), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['family_id'], ['families.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.create_index('idx_event_family_start', ['family_id', 'start_time'], unique=False)
        batch_op.create_index('idx_event_time_range', ['family_id', 'start_time', 'end_time'], unique=False)
        batch_op.create_index('idx_event_created_by', ['created_by'], unique=False)

    op.create_table('achievements',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('type', _enum('badge', 'level', 'milestone', name='achievementtype'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon_url', sa.String(length=500), nullable=True),
        sa.Column('points_awarded', sa.Integer(), server_default='0', nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('achievements', schema=None) as batch_op:
        batch_op.create_index('idx_achievement_user', ['user_id', 'unlocked_at'], unique=False)

    op.create_table('notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', _enum('task', 'event', 'achievement', 'family', name='notificationtype'), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default='0', nullable=False),
        sa.Column('action_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('notifications', schema=None) as batch_op:
        batch_op.create_index('idx_notification_user', ['user_id', 'created_at'], unique=False)

    op.create_table('sessions',
        sa.Column('sid', sa.String(length=128), nullable=False),
        sa.Column('sess', _json(), nullable=False),
        sa.Column('expire', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('sid')
    )
    with op.batch_alter_table('sessions', schema=None) as batch_op:
        batch_op.create_index('IDX_session_expire', ['expire'], unique=False)


def downgrade() -> None:
    with op.batch_alter_table('sessions', schema=None) as batch_op:
        batch_op.drop_index('IDX_session_expire')
    op.drop_table('sessions')

    with op.batch_alter_table('notifications', schema=None) as batch_op:
        batch_op.drop_index('idx_notification_user')
    op.drop_table('notifications')

    with op.batch_alter_table('achievements', schema=None) as batch_op:
        batch_op.drop_index('idx_achievement_user')
    op.drop_table('achievements')

    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.drop_index('idx_event_created_by')
        batch_op.drop_index('idx_event_time_range')
        batch_op.drop_index('idx_event_family_start')
    op.drop_table('events')

    with op.batch_alter_table('tasks', schema=None) as batch_op:
        batch_op.drop_index('idx_task_status')
        batch_op.drop_index('idx_task_assignee')
        batch_op.drop_index('idx_task_family_quadrant')
        batch_op.drop_index('idx_task_family_created')
    op.drop_table('tasks')

    op.drop_table('families')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index('idx_user_role')
        batch_op.drop_index('idx_user_family')
    op.drop_table('users')
