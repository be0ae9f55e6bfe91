"""add_task_merge_tables

Revision ID: 8f02b6d4e1c7
Revises: 4c1d7e2a9b30
Create Date: 2026-09-21 16:04:09.772915

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '8f02b6d4e1c7'
down_revision: Union[str, Sequence[str], None] = '4c1d7e2a9b30'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tasks, task_assignments, task_merge_logs and notifications tables."""
    op.create_table('tasks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False, server_default='medium'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('project_title', sa.String(length=255), nullable=True),
        sa.Column('assigned_user_id', sa.UUID(), nullable=True),
        sa.Column('assignment_status', sa.String(length=20), nullable=True),
        sa.Column('created_by_user_id', sa.UUID(), nullable=True),
        sa.Column('last_reminder_sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("assignment_status IN ('pending', 'accepted', 'declined')"),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_organization_id', 'tasks', ['organization_id'], unique=False)
    # Serves the pending-request reminder sweep
    op.create_index(
        'ix_tasks_assignment_status_updated',
        'tasks',
        ['assignment_status', 'updated_at'],
        unique=False,
    )

    op.create_table('task_assignments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('assigned_by', sa.UUID(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='accepted'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'declined')"),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('task_id', 'user_id'),
    )
    op.create_index('ix_task_assignments_user_id', 'task_assignments', ['user_id'], unique=False)

    op.create_table('task_merge_logs',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('performed_by', sa.UUID(), nullable=False),
        sa.Column('source_user_id', sa.UUID(), nullable=False),
        sa.Column('target_user_id', sa.UUID(), nullable=False),
        sa.Column('merge_type', sa.String(length=20), nullable=False),
        sa.Column('temporary_start_date', sa.Date(), nullable=True),
        sa.Column('temporary_end_date', sa.Date(), nullable=True),
        sa.Column(
            'tasks_transferred',
            postgresql.JSONB(astext_type=sa.Text()),
            server_default='[]',
            nullable=True,
        ),
        sa.Column('task_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='completed'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('reverted_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("merge_type IN ('permanent', 'temporary')"),
        sa.CheckConstraint("status IN ('completed', 'pending_revert', 'reverted')"),
        sa.CheckConstraint(
            "merge_type = 'permanent' OR temporary_end_date > temporary_start_date",
            name='ck_task_merge_logs_temporary_dates',
        ),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['performed_by'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['source_user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_task_merge_logs_organization_id', 'task_merge_logs', ['organization_id'], unique=False
    )
    op.create_index(
        'ix_task_merge_logs_status_end',
        'task_merge_logs',
        ['status', 'temporary_end_date'],
        unique=False,
    )

    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('reference_id', sa.UUID(), nullable=True),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop task merge and notification tables."""
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_task_merge_logs_status_end', table_name='task_merge_logs')
    op.drop_index('ix_task_merge_logs_organization_id', table_name='task_merge_logs')
    op.drop_table('task_merge_logs')

    op.drop_index('ix_task_assignments_user_id', table_name='task_assignments')
    op.drop_table('task_assignments')

    op.drop_index('ix_tasks_assignment_status_updated', table_name='tasks')
    op.drop_index('ix_tasks_organization_id', table_name='tasks')
    op.drop_table('tasks')
