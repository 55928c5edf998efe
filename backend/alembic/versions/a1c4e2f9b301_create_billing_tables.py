"""create plans, user_plans and subscriptions tables

Revision ID: a1c4e2f9b301
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e2f9b301'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(64), nullable=False, comment='free / pro / lifetime ...'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False, comment='Price in cents'),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column(
            'billing_cycle',
            sa.Enum('free', 'monthly', 'yearly', 'lifetime', name='plan_billing_cycle'),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, comment='Display order (lower first)'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'user_plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('active', 'cancelled', 'expired', 'past_due', 'trialing', name='user_plan_status'),
            nullable=False,
        ),
        sa.Column('start_date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True, comment='NULL for free and lifetime plans'),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('payment_provider', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_plans_user_id', 'user_plans', ['user_id'])
    op.create_index('ix_user_plans_plan_id', 'user_plans', ['plan_id'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False, comment='Amount in cents'),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('billing_cycle', sa.String(16), nullable=False, comment='daily / weekly / monthly / yearly'),
        sa.Column('frequency', sa.Integer(), nullable=False, comment='Bill every N cycles'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('next_billing_date', sa.Date(), nullable=True),
        sa.Column('free_trial_end_date', sa.Date(), nullable=True),
        sa.Column('auto_renew', sa.Boolean(), nullable=False),
        sa.Column('notified_for_current_cycle', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_subscriptions_owner_id', 'subscriptions', ['owner_id'])
    op.create_index('ix_subscriptions_next_billing_date', 'subscriptions', ['next_billing_date'])


def downgrade() -> None:
    op.drop_index('ix_subscriptions_next_billing_date', table_name='subscriptions')
    op.drop_index('ix_subscriptions_owner_id', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_user_plans_plan_id', table_name='user_plans')
    op.drop_index('ix_user_plans_user_id', table_name='user_plans')
    op.drop_table('user_plans')
    op.drop_table('plans')
    sa.Enum(name='user_plan_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='plan_billing_cycle').drop(op.get_bind(), checkfirst=True)
