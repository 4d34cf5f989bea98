# alembic/versions/20261018_baseline_schema.py
"""Baseline schema: users, profiles, the four module event tables and the recommendation inbox

Revision ID: 20261018_baseline
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '20261018_baseline'
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    'coachingmodule': ('training', 'nutrition', 'mental', 'productivity'),
    'subscriptiontier': ('free', 'premium', 'pro'),
    'subscriptionstatus': ('active', 'past_due', 'canceled'),
    'fitnesslevel': ('beginner', 'intermediate', 'advanced'),
    'mealtype': ('breakfast', 'lunch', 'dinner', 'snack'),
}


def _enum(name):
    # Types are created once below; columns only reference them.
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _timestamp(name, nullable=False):
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=nullable)


def upgrade() -> None:
    if op.get_bind().dialect.name == 'postgresql':
        for enum_name, values in ENUMS.items():
            quoted = ", ".join(f"'{v}'" for v in values)
            op.execute(f"""
                DO $$
                BEGIN
                    IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = '{enum_name}') THEN
                        CREATE TYPE {enum_name} AS ENUM ({quoted});
                    END IF;
                END$$;
            """)

    # USERS
    op.create_table('users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('billing_customer_id', sa.String(), nullable=True),
        sa.Column('subscription_id', sa.String(), nullable=True),
        sa.Column('subscription_tier', _enum('subscriptiontier'), server_default='free', nullable=False),
        sa.Column('subscription_status', _enum('subscriptionstatus'), server_default='active', nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_billing_customer_id', 'users', ['billing_customer_id'], unique=True)

    # USER PROFILES
    op.create_table('user_profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('primary_goal', _enum('coachingmodule'), nullable=True),
        sa.Column('fitness_level', _enum('fitnesslevel'), nullable=True),
        sa.Column('dietary_restrictions', sa.Text(), nullable=True),
        sa.Column('health_conditions', sa.Text(), nullable=True),
        sa.Column('weekly_goals', _json(), nullable=True),
        sa.Column('preferences', _json(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    # MODULE EVENTS
    op.create_table('training_sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('workout_type', sa.String(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('calories_burned', sa.Integer(), nullable=True),
        sa.Column('exercises', _json(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        _timestamp('completed_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_training_sessions_user_id', 'training_sessions', ['user_id'])
    op.create_index('ix_training_sessions_completed_at', 'training_sessions', ['completed_at'])

    op.create_table('nutrition_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('meal_type', _enum('mealtype'), nullable=False),
        sa.Column('food_items', _json(), nullable=True),
        sa.Column('total_calories', sa.Integer(), nullable=False),
        sa.Column('macros', _json(), nullable=True),
        _timestamp('logged_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_nutrition_entries_user_id', 'nutrition_entries', ['user_id'])
    op.create_index('ix_nutrition_entries_logged_at', 'nutrition_entries', ['logged_at'])

    op.create_table('mental_sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('session_type', sa.String(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('mood_before', sa.Integer(), nullable=False),
        sa.Column('mood_after', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        _timestamp('completed_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_mental_sessions_user_id', 'mental_sessions', ['user_id'])
    op.create_index('ix_mental_sessions_completed_at', 'mental_sessions', ['completed_at'])

    op.create_table('productivity_sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('session_type', sa.String(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('tasks_completed', sa.Integer(), nullable=False),
        sa.Column('focus_score', sa.Integer(), nullable=False),
        sa.Column('productivity', _json(), nullable=True),
        _timestamp('completed_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_productivity_sessions_user_id', 'productivity_sessions', ['user_id'])
    op.create_index('ix_productivity_sessions_completed_at', 'productivity_sessions', ['completed_at'])

    # RECOMMENDATION INBOX
    op.create_table('ai_recommendations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('module', _enum('coachingmodule'), nullable=False),
        sa.Column('recommendation_type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('action_data', _json(), nullable=True),
        sa.Column('priority', sa.Integer(), server_default='5', nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_completed', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        _timestamp('created_at'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('priority BETWEEN 1 AND 10', name='ck_ai_recommendations_priority'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ai_recommendations_user_id', 'ai_recommendations', ['user_id'])
    op.create_index(
        'ix_ai_recommendations_inbox', 'ai_recommendations',
        ['user_id', 'is_completed', 'priority', 'created_at'],
    )


def downgrade() -> None:
    op.drop_table('ai_recommendations')
    op.drop_table('productivity_sessions')
    op.drop_table('mental_sessions')
    op.drop_table('nutrition_entries')
    op.drop_table('training_sessions')
    op.drop_table('user_profiles')
    op.drop_table('users')
    if op.get_bind().dialect.name == 'postgresql':
        for enum_name in ENUMS:
            op.execute(f"DROP TYPE IF EXISTS {enum_name}")
