"""Create ambassadors, brands and contracts tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

This migration creates the marketplace tables: ambassadors (payees),
brands (payers) and the contracts settled between them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the marketplace tables."""
    op.create_table(
        'ambassadors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column(
            'onboarding_step',
            sa.Enum('ACCOUNT', 'PROFILE', 'PAYOUT', 'COMPLETE', name='onboarding_step', create_constraint=True),
            nullable=False,
            server_default='PROFILE'
        ),
        sa.Column('stripe_account_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ambassadors_email', 'ambassadors', ['email'], unique=True)
    op.create_index('ix_ambassadors_stripe_account_id', 'ambassadors', ['stripe_account_id'])
    op.create_index('ix_ambassadors_created_at', 'ambassadors', ['created_at'])

    op.create_table(
        'brands',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('client_email', sa.String(length=255), nullable=False),
        sa.Column('routing_email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('stripe_customer_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_brands_client_email', 'brands', ['client_email'], unique=True)
    op.create_index('ix_brands_name', 'brands', ['name'])
    op.create_index('ix_brands_created_at', 'brands', ['created_at'])

    op.create_table(
        'contracts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ambassador_id', sa.Integer(), nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('post_link', sa.String(length=500), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('accepted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'SETTLING', 'SETTLED', 'FAILED', name='contract_status', create_constraint=True),
            nullable=False,
            server_default='PENDING'
        ),
        sa.Column('stripe_charge_id', sa.String(length=255), nullable=True),
        sa.Column('stripe_transfer_id', sa.String(length=255), nullable=True),
        sa.Column('last_error', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['ambassador_id'],
            ['ambassadors.id'],
            name='fk_contracts_ambassador_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['brand_id'],
            ['brands.id'],
            name='fk_contracts_brand_id',
            ondelete='CASCADE'
        ),
    )

    # Create indexes for common queries
    op.create_index('ix_contracts_ambassador_id', 'contracts', ['ambassador_id'])
    op.create_index('ix_contracts_brand_id', 'contracts', ['brand_id'])
    op.create_index('ix_contracts_status', 'contracts', ['status'])
    op.create_index('ix_contracts_created_at', 'contracts', ['created_at'])


def downgrade() -> None:
    """Drop the marketplace tables."""
    op.drop_index('ix_contracts_created_at', table_name='contracts')
    op.drop_index('ix_contracts_status', table_name='contracts')
    op.drop_index('ix_contracts_brand_id', table_name='contracts')
    op.drop_index('ix_contracts_ambassador_id', table_name='contracts')
    op.drop_table('contracts')

    op.drop_index('ix_brands_created_at', table_name='brands')
    op.drop_index('ix_brands_name', table_name='brands')
    op.drop_index('ix_brands_client_email', table_name='brands')
    op.drop_table('brands')

    op.drop_index('ix_ambassadors_created_at', table_name='ambassadors')
    op.drop_index('ix_ambassadors_stripe_account_id', table_name='ambassadors')
    op.drop_index('ix_ambassadors_email', table_name='ambassadors')
    op.drop_table('ambassadors')
