"""Create portal tables

Revision ID: 20261001_000001
Revises: None
Create Date: 2026-10-01

Practices, users, invoices, payments, notifications and audit logs.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261001_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the tenant-owned tables."""
    op.create_table(
        'practices',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('stripe_customer_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_customer_id', name='uq_practices_stripe_customer_id'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('auth_user_id', sa.String(64), nullable=False),
        sa.Column('practice_id', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('role', sa.Enum('admin', 'staff', name='user_role'), nullable=False, server_default='staff'),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['practice_id'],
            ['practices.id'],
            name='fk_users_practice_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_users_auth_user_id', 'users', ['auth_user_id'], unique=True)
    op.create_index('ix_users_practice_id', 'users', ['practice_id'])

    op.create_table(
        'invoices',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('practice_id', sa.String(64), nullable=False),
        sa.Column('invoice_number', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('amount_paid', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('paid_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'overdue', 'cancelled', name='invoice_status'),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number', name='uq_invoices_invoice_number'),
        sa.ForeignKeyConstraint(
            ['practice_id'],
            ['practices.id'],
            name='fk_invoices_practice_id',
            ondelete='CASCADE'
        ),
    )

    # Create indexes for common queries
    op.create_index('ix_invoices_practice_id', 'invoices', ['practice_id'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('invoice_id', sa.String(64), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stripe_payment_id', sa.String(255), nullable=False),
        sa.Column('status', sa.Enum('completed', 'failed', name='payment_status'), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['invoice_id'],
            ['invoices.id'],
            name='fk_payments_invoice_id',
            ondelete='RESTRICT',
        ),
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'])
    op.create_index('ix_payments_stripe_payment_id', 'payments', ['stripe_payment_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('practice_id', sa.String(64), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['practice_id'],
            ['practices.id'],
            name='fk_notifications_practice_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_notifications_practice_id', 'notifications', ['practice_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('practice_id', sa.String(64), nullable=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.String(255), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['practice_id'], ['practices.id'], name='fk_audit_logs_practice_id', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_audit_logs_user_id', ondelete='SET NULL'),
    )
    op.create_index('ix_audit_logs_practice_id', 'audit_logs', ['practice_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])


def downgrade() -> None:
    """Drop the tenant-owned tables."""
    op.drop_table('audit_logs')
    op.drop_table('notifications')
    op.drop_table('payments')
    op.drop_table('invoices')
    op.drop_table('users')
    op.drop_table('practices')

    # Drop the enum types
    op.execute("DROP TYPE IF EXISTS payment_status")
    op.execute("DROP TYPE IF EXISTS invoice_status")
    op.execute("DROP TYPE IF EXISTS user_role")
