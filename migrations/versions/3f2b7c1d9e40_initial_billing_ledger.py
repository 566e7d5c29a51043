"""initial billing ledger: users, subscriptions, webhook_events, generation_actions

Revision ID: 3f2b7c1d9e40
Revises:
Create Date: 2026-10-18 10:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f2b7c1d9e40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('polar_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('customer_id', sa.String(length=64), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default=sa.text("'incomplete'")),
        sa.Column('polar_price_id', sa.String(length=64), nullable=True),
        sa.Column('currency', sa.String(length=8), nullable=True),
        sa.Column('interval', sa.String(length=16), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=True),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column('canceled_at', sa.DateTime(), nullable=True),
        sa.Column('customer_cancellation_reason', sa.String(length=64), nullable=True),
        sa.Column('customer_cancellation_comment', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('custom_field_data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_subscriptions_polar_id', 'subscriptions', ['polar_id'], unique=True)
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index('ix_subscriptions_customer_id', 'subscriptions', ['customer_id'])
    op.create_index('ix_subscriptions_status', 'subscriptions', ['status'])
    op.create_index('ix_subscriptions_polar_price_id', 'subscriptions', ['polar_price_id'])
    op.create_index('ix_subscriptions_current_period_end', 'subscriptions', ['current_period_end'])

    op.create_table(
        'webhook_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_type', sa.String(length=80), nullable=False),
        sa.Column('polar_event_id', sa.String(length=255), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('outcome', sa.String(length=16), nullable=True),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('modified_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_webhook_events_event_type', 'webhook_events', ['event_type'])
    op.create_index('ix_webhook_events_polar_event_id', 'webhook_events', ['polar_event_id'])
    op.create_index('ix_webhook_events_outcome', 'webhook_events', ['outcome'])

    op.create_table(
        'generation_actions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('kind', sa.String(length=32), nullable=False),
        sa.Column('job_title', sa.String(length=255), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete="CASCADE"),
    )
    op.create_index('ix_generation_actions_user_id', 'generation_actions', ['user_id'])
    op.create_index('ix_generation_actions_created_at', 'generation_actions', ['created_at'])
    op.create_index('ix_generation_actions_user_created', 'generation_actions', ['user_id', 'created_at'])


def downgrade():
    op.drop_index('ix_generation_actions_user_created', table_name='generation_actions')
    op.drop_index('ix_generation_actions_created_at', table_name='generation_actions')
    op.drop_index('ix_generation_actions_user_id', table_name='generation_actions')
    op.drop_table('generation_actions')

    op.drop_index('ix_webhook_events_outcome', table_name='webhook_events')
    op.drop_index('ix_webhook_events_polar_event_id', table_name='webhook_events')
    op.drop_index('ix_webhook_events_event_type', table_name='webhook_events')
    op.drop_table('webhook_events')

    op.drop_index('ix_subscriptions_current_period_end', table_name='subscriptions')
    op.drop_index('ix_subscriptions_polar_price_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_status', table_name='subscriptions')
    op.drop_index('ix_subscriptions_customer_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_user_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_polar_id', table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
