"""add scheduler_states and change_snapshots tables

Revision ID: 5b2f7c1d9e04
Revises:
Create Date: 2026-10-19 10:12:41.208114

One row per workspace in each table. Scheduler state columns are all
nullable so that partially written rows load with per-field defaults.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel.sql.sqltypes

# revision identifiers, used by Alembic.
revision: str = '5b2f7c1d9e04'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('scheduler_states',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('last_activity_at', sa.DateTime(), nullable=True),
        sa.Column('ping_scheduled_at', sa.DateTime(), nullable=True),
        sa.Column('base_interval_ms', sa.Integer(), nullable=True),
        sa.Column('current_interval_ms', sa.Integer(), nullable=True),
        sa.Column('max_interval_ms', sa.Integer(), nullable=True),
        sa.Column('idle_threshold_ms', sa.Integer(), nullable=True),
        sa.Column('is_waiting', sa.Boolean(), nullable=True),
        sa.Column('blocker_type', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column('last_answers', sa.JSON(), nullable=True),
        sa.Column('last_checkin_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_scheduler_states_workspace_id'), 'scheduler_states', ['workspace_id'], unique=True)

    op.create_table('change_snapshots',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('taken_at', sa.DateTime(), nullable=False),
        sa.Column('changed_files', sa.JSON(), nullable=False),
        sa.Column('summary', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_change_snapshots_workspace_id'), 'change_snapshots', ['workspace_id'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_change_snapshots_workspace_id'), table_name='change_snapshots')
    op.drop_table('change_snapshots')
    op.drop_index(op.f('ix_scheduler_states_workspace_id'), table_name='scheduler_states')
    op.drop_table('scheduler_states')
