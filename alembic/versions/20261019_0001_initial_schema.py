"""Initial schema - staking ledger

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# u64 columns are zero-padded decimal strings (see staking_ledger.kernel.models.base.Uint64)
U64 = sa.String(20)


def _allocated_columns():
    return [
        sa.Column('address', sa.String(64), primary_key=True),
        sa.Column('bump', sa.Integer(), nullable=False),
        sa.Column('data_len', sa.Integer(), nullable=False),
        sa.Column('deposit', sa.BigInteger(), nullable=False, default=0),
    ]


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Platform singleton
    op.create_table(
        'platform_registry',
        *_allocated_columns(),
        sa.Column('authorities', sa.JSON(), nullable=False),
        sa.Column('project_count', U64, nullable=False),
        *_timestamps(),
    )

    # Projects
    op.create_table(
        'project_registry',
        *_allocated_columns(),
        sa.Column('project_id', U64, nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('project_authority', sa.String(64), nullable=False, index=True),
        sa.Column('asset_id', sa.String(64), nullable=False),
        sa.Column('custody_ref', sa.String(64), nullable=False),
        sa.Column('asset_mover_id', sa.String(64), nullable=False),
        sa.Column('fee_recipient', sa.String(64), nullable=False),
        sa.Column('unstake_fee_bps', sa.Integer(), nullable=False, default=0),
        sa.Column('emergency_unstake_fee_bps', sa.Integer(), nullable=False, default=0),
        sa.Column('allowed_durations', sa.JSON(), nullable=False),
        *_timestamps(),
    )

    # Stakes
    op.create_table(
        'stake_records',
        *_allocated_columns(),
        sa.Column('depositor', sa.String(64), nullable=False),
        sa.Column('project_ref', sa.String(64), sa.ForeignKey('project_registry.address'), nullable=False),
        sa.Column('project_id', U64, nullable=False),
        sa.Column('stake_id', U64, nullable=False),
        sa.Column('amount', U64, nullable=False),
        sa.Column('deposit_time', sa.BigInteger(), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, default=True),
        sa.Column('status', sa.String(32), nullable=False, default='active'),
        *_timestamps(),
    )
    op.create_index('ix_stake_records_project_depositor', 'stake_records', ['project_ref', 'depositor'])

    # Withdrawal receipts
    op.create_table(
        'unstake_records',
        *_allocated_columns(),
        sa.Column('stake_ref', sa.String(64), sa.ForeignKey('stake_records.address'), nullable=False, unique=True),
        sa.Column('depositor', sa.String(64), nullable=False, index=True),
        sa.Column('project_ref', sa.String(64), nullable=False),
        sa.Column('project_id', U64, nullable=False),
        sa.Column('stake_id', U64, nullable=False),
        sa.Column('amount', U64, nullable=False),
        sa.Column('fee', U64, nullable=False),
        sa.Column('payout', U64, nullable=False),
        sa.Column('settlement_time', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        *_timestamps(),
    )

    # Custody accounts of the built-in asset mover
    op.create_table(
        'asset_accounts',
        sa.Column('address', sa.String(64), primary_key=True),
        sa.Column('asset_id', sa.String(64), nullable=False, index=True),
        sa.Column('owner', sa.String(64), nullable=False, index=True),
        sa.Column('mover_id', sa.String(64), nullable=False),
        sa.Column('balance', U64, nullable=False),
        sa.Column('frozen', sa.Boolean(), nullable=False, default=False),
        *_timestamps(),
    )

    # Event logs table (append-only)
    op.create_table(
        'event_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_type', sa.String(100), nullable=False, index=True),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('actor', sa.String(64), nullable=True, index=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('request_id', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index('ix_event_logs_entity', 'event_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_event_logs_actor_time', 'event_logs', ['actor', 'created_at'])
    op.create_index('ix_event_logs_type_time', 'event_logs', ['event_type', 'created_at'])


def downgrade() -> None:
    op.drop_table('event_logs')
    op.drop_table('asset_accounts')
    op.drop_table('unstake_records')
    op.drop_table('stake_records')
    op.drop_table('project_registry')
    op.drop_table('platform_registry')
