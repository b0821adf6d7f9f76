"""Add routine adaptation tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create cycle profile, routine, attachment and weather tables."""
    op.create_table('cycle_profiles', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('last_period_start_date', sa.Date(), nullable=False),
        sa.Column('average_cycle_length', sa.Integer(), nullable=False, server_default='28'),
        sa.Column('period_length', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_cycle_profiles_user_id'), 'cycle_profiles', ['user_id'], unique=True)

    op.create_table('routines', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=False),
        sa.Column('adaptation_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('adaptation_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_routines_user_id'), 'routines', ['user_id'], unique=False)

    op.create_table('routine_steps', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('routine_id', sa.Integer(), nullable=False),
        sa.Column('product_category', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('time_of_day', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column('step_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=False, server_default=''),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.ForeignKeyConstraint(['routine_id'], ['routines.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_routine_steps_routine_id'), 'routine_steps', ['routine_id'], unique=False)

    op.create_table('routine_adaptation_attachments', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('routine_id', sa.Integer(), nullable=False),
        sa.Column('adaptation_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('custom_rules', sa.JSON(), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.ForeignKeyConstraint(['routine_id'], ['routines.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('routine_id', 'adaptation_type', name='uq_routine_adaptation_type'))
    op.create_index(op.f('ix_routine_adaptation_attachments_routine_id'), 'routine_adaptation_attachments',
                    ['routine_id'], unique=False)

    op.create_table('weather_preferences', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('weather_adaptation_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('last_reading', sa.JSON(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_weather_preferences_user_id'), 'weather_preferences', ['user_id'], unique=True)


def downgrade() -> None:
    """Drop the routine adaptation tables."""
    op.drop_index(op.f('ix_weather_preferences_user_id'), table_name='weather_preferences')
    op.drop_table('weather_preferences')
    op.drop_index(op.f('ix_routine_adaptation_attachments_routine_id'), table_name='routine_adaptation_attachments')
    op.drop_table('routine_adaptation_attachments')
    op.drop_index(op.f('ix_routine_steps_routine_id'), table_name='routine_steps')
    op.drop_table('routine_steps')
    op.drop_index(op.f('ix_routines_user_id'), table_name='routines')
    op.drop_table('routines')
    op.drop_index(op.f('ix_cycle_profiles_user_id'), table_name='cycle_profiles')
    op.drop_table('cycle_profiles')
