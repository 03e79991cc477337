"""create lifting schema: users, exercises, plans, mesocycles, workouts, sets

Revision ID: 5b1e0c7d9a21
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# define the enum types once so we can create/drop them explicitly
mesocycle_status = sa.Enum('pending', 'active', 'completed', 'cancelled', name='mesocycle_status')
workout_status = sa.Enum('pending', 'in_progress', 'completed', 'skipped', name='workout_status')
set_status = sa.Enum('pending', 'completed', 'skipped', name='set_status')


# revision identifiers, used by Alembic.
revision: str = '5b1e0c7d9a21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 2) exercise library
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('weight_increment', sa.Numeric(10, 2), nullable=False, server_default='5'),
        sa.Column('is_custom', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 3) plans / days / day exercises
    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('duration_weeks', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_table(
        'plan_days',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('plans.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_table(
        'plan_day_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('plan_day_id', sa.Integer(), sa.ForeignKey('plan_days.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('sets', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('reps', sa.Integer(), nullable=False, server_default='8'),
        sa.Column('weight', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('min_reps', sa.Integer(), nullable=False, server_default='8'),
        sa.Column('target_reps', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('max_reps', sa.Integer(), nullable=False, server_default='12'),
        sa.Column('rest_seconds', sa.Integer(), nullable=False, server_default='90'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )

    # 4) mesocycles
    op.create_table(
        'mesocycles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('plans.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('total_weeks', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('deload_week', sa.Integer(), nullable=True),
        sa.Column('current_week', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', mesocycle_status, nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 5) workouts and their sets
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mesocycle_id', sa.Integer(), sa.ForeignKey('mesocycles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('plan_day_id', sa.Integer(), sa.ForeignKey('plan_days.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('status', workout_status, nullable=False, server_default='pending'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        'workout_sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('target_reps', sa.Integer(), nullable=False),
        sa.Column('target_weight', sa.Numeric(10, 2), nullable=False),
        sa.Column('actual_reps', sa.Integer(), nullable=True),
        sa.Column('actual_weight', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', set_status, nullable=False, server_default='pending'),
        sa.UniqueConstraint('workout_id', 'exercise_id', 'set_number', name='uq_workout_exercise_set'),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('workout_sets')
    op.drop_table('workouts')
    op.drop_table('mesocycles')
    op.drop_table('plan_day_exercises')
    op.drop_table('plan_days')
    op.drop_table('plans')
    op.drop_table('exercises')
    op.drop_table('users')

    # finally drop enum types
    bind = op.get_bind()
    set_status.drop(bind, checkfirst=True)
    workout_status.drop(bind, checkfirst=True)
    mesocycle_status.drop(bind, checkfirst=True)
