"""create subscriptions and subscription_tokens tables

Revision ID: 0001_create_subscriptions
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_create_subscriptions'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('subscribed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='subscriptions_email_key'),
    )
    # Speeds up the lookup made when an already subscribed email resubscribes
    op.create_index(op.f('ix_subscriptions_name'), 'subscriptions', ['name'], unique=False)

    op.create_table(
        'subscription_tokens',
        sa.Column('subscription_token', sa.String(length=25), nullable=False),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['subscriber_id'], ['subscriptions.id']),
        sa.PrimaryKeyConstraint('subscription_token'),
        sa.UniqueConstraint('subscriber_id'),
    )


def downgrade() -> None:
    op.drop_table('subscription_tokens')
    op.drop_index(op.f('ix_subscriptions_name'), table_name='subscriptions')
    op.drop_table('subscriptions')
