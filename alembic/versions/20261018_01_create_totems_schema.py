"""Create totems registry schema

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18 09:12:44.108214

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AMOUNT = sa.Numeric(precision=78, scale=0)


def upgrade():
    op.create_table(
        'totems',
        sa.Column('ticker', sa.String(length=10), primary_key=True),
        sa.Column('ticker_key', sa.String(length=66), nullable=False, unique=True),
        sa.Column('list_index', sa.Integer(), nullable=False, unique=True),
        sa.Column('creator', sa.String(length=42), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.Text(), nullable=False),
        sa.Column('website', sa.Text(), nullable=False),
        sa.Column('decimals', sa.Integer(), nullable=False),
        sa.Column('seed', sa.String(length=66), nullable=False),
        sa.Column('supply', AMOUNT, nullable=False),
        sa.Column('max_supply', AMOUNT, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_totems_list_index', 'totems', ['list_index'])
    op.create_index('ix_totems_creator', 'totems', ['creator'])

    op.create_table(
        'totem_mods',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(length=10), nullable=False),
        sa.Column('hook', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('capabilities', sa.Integer(), nullable=False),
        sa.Column('requires_setup', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('ticker', 'hook', 'position'),
    )
    op.create_index('ix_totem_mods_ticker', 'totem_mods', ['ticker'])
    op.create_index('ix_totem_mods_address', 'totem_mods', ['address'])

    op.create_table(
        'balances',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('balance', AMOUNT, nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('ticker', 'address'),
    )
    op.create_index('ix_balances_ticker', 'balances', ['ticker'])
    op.create_index('ix_balances_address', 'balances', ['address'])

    op.create_table(
        'totem_stats',
        sa.Column('ticker', sa.String(length=10), primary_key=True),
        sa.Column('mints', sa.BigInteger(), nullable=False),
        sa.Column('burns', sa.BigInteger(), nullable=False),
        sa.Column('transfers', sa.BigInteger(), nullable=False),
        sa.Column('holders', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        'licenses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('granted_by', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('ticker', 'address'),
    )
    op.create_index('ix_licenses_ticker', 'licenses', ['ticker'])
    op.create_index('ix_licenses_address', 'licenses', ['address'])

    op.create_table(
        'totem_minters',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('is_unlimited', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('ticker', 'address'),
    )
    op.create_index('ix_totem_minters_ticker', 'totem_minters', ['ticker'])
    op.create_index('ix_totem_minters_address', 'totem_minters', ['address'])

    op.create_table(
        'relays',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('standard', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('ticker', 'standard'),
        sa.UniqueConstraint('ticker', 'address'),
    )
    op.create_index('ix_relays_ticker', 'relays', ['ticker'])
    op.create_index('ix_relays_address', 'relays', ['address'])

    op.create_table(
        'totem_events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('ticker', sa.String(length=10), nullable=True),
        sa.Column('actor', sa.String(length=42), nullable=True),
        sa.Column('counterparty', sa.String(length=42), nullable=True),
        sa.Column('mod', sa.String(length=42), nullable=True),
        sa.Column('amount', AMOUNT, nullable=True),
        sa.Column('payment', AMOUNT, nullable=True),
        sa.Column('memo', sa.Text(), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_totem_events_event_type', 'totem_events', ['event_type'])
    op.create_index('ix_totem_events_ticker', 'totem_events', ['ticker'])
    op.create_index('ix_totem_events_actor', 'totem_events', ['actor'])

    op.create_table(
        'referrer_fees',
        sa.Column('referrer', sa.String(length=42), primary_key=True),
        sa.Column('fee', AMOUNT, nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table('referrer_fees')
    op.drop_table('totem_events')
    op.drop_table('relays')
    op.drop_table('totem_minters')
    op.drop_table('licenses')
    op.drop_table('totem_stats')
    op.drop_table('balances')
    op.drop_table('totem_mods')
    op.drop_table('totems')
