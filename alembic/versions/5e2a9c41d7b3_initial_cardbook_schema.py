"""initial cardbook schema

Revision ID: 5e2a9c41d7b3
Revises:
Create Date: 2026-10-19 10:12:31.204118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5e2a9c41d7b3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'keywords',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('name'),
    )

    op.create_table(
        'transactions',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('transaction_key', sa.String(length=512), nullable=False),
        sa.Column('date', sa.String(length=64), nullable=False),
        sa.Column('merchant', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=9), nullable=False, server_default='completed'),
        sa.Column('payment_method', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('state', sa.String(length=7), nullable=False, server_default='active'),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_key'),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'], unique=False)
    op.create_index('ix_transactions_merchant_date', 'transactions', ['merchant', 'date'], unique=False)
    op.create_index('ix_transactions_user_id_state', 'transactions', ['user_id', 'state'], unique=False)

    op.create_table(
        'analysis_history',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('total_score', sa.Integer(), nullable=False),
        sa.Column('health_status', sa.String(length=50), nullable=False),
        sa.Column('health_description', sa.Text(), nullable=False),
        # JSON arrays stored as text
        sa.Column('trends', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('recommendations', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'month', name='uq_analysis_history_user_month'),
    )
    op.create_index('ix_analysis_history_user_id', 'analysis_history', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_analysis_history_user_id', table_name='analysis_history')
    op.drop_table('analysis_history')

    op.drop_index('ix_transactions_user_id_state', table_name='transactions')
    op.drop_index('ix_transactions_merchant_date', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_table('transactions')

    op.drop_table('keywords')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
