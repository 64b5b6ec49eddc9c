"""Initial migration - create ticker_records table.

Revision ID: 001
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'ticker_records',
        sa.Column('symbol', sa.String(length=10), primary_key=True),
        sa.Column('collection_name', sa.String(), nullable=False),
        sa.Column('collection_address', sa.String(), nullable=False, server_default=''),
        sa.Column('creator_wallet', sa.String(), nullable=False),
        sa.Column('registered_at', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('mirror_status', sa.String(), nullable=True),
        sa.Column('mirror_signature', sa.String(), nullable=True),
    )
    op.create_index('ix_ticker_records_creator_wallet', 'ticker_records', ['creator_wallet'])
    op.create_index('ix_ticker_records_status', 'ticker_records', ['status'])


def downgrade() -> None:
    op.drop_index('ix_ticker_records_status', table_name='ticker_records')
    op.drop_index('ix_ticker_records_creator_wallet', table_name='ticker_records')
    op.drop_table('ticker_records')
