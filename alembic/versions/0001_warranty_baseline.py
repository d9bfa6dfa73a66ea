"""Baseline migration - builder groups, homeowners, claims, claim messages

Revision ID: 0001_warranty_baseline
Revises: 
Create Date: 2026-10-19

Portable column types (Uuid, JSON) so the same migration runs on
PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_warranty_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create warranty tables."""

    # ==========================================================================
    # Builder groups
    # ==========================================================================
    op.create_table(
        'builder_groups',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('primary_contact', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ==========================================================================
    # Homeowners
    # ==========================================================================
    op.create_table(
        'homeowners',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'builder_group_id',
            sa.Uuid(),
            sa.ForeignKey('builder_groups.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('job_name', sa.String(255), nullable=True),
        sa.Column('closing_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_homeowners_builder_group', 'homeowners', ['builder_group_id'])
    op.create_index('idx_homeowners_name_address', 'homeowners', ['name', 'address'])

    # ==========================================================================
    # Claims (no homeowner FK: name/address are a submission snapshot)
    # ==========================================================================
    op.create_table(
        'claims',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('claim_number', sa.String(30), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('homeowner_name', sa.String(255), nullable=False),
        sa.Column('homeowner_email', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('builder_name', sa.String(255), nullable=True),
        sa.Column('contractor_name', sa.String(255), nullable=True),
        sa.Column('contractor_email', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('classification', sa.String(50), nullable=False),
        sa.Column('reviewed', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('date_submitted', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('date_evaluated', sa.DateTime(timezone=True), nullable=True),
        sa.Column('proposed_dates', sa.JSON(), nullable=False),
        sa.Column('comments', sa.JSON(), nullable=False),
        sa.Column('attachments', sa.JSON(), nullable=False),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_claims_status', 'claims', ['status'])
    op.create_index('idx_claims_homeowner_snapshot', 'claims', ['homeowner_name', 'address'])
    op.create_index('idx_claims_submitted', 'claims', ['date_submitted'])

    # ==========================================================================
    # Claim messages
    # ==========================================================================
    op.create_table(
        'claim_messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'claim_id',
            sa.Uuid(),
            sa.ForeignKey('claims.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('message_type', sa.String(20), nullable=False),
        sa.Column('subject', sa.String(500), nullable=False),
        sa.Column('recipient', sa.String(255), nullable=True),
        sa.Column('recipient_email', sa.String(255), nullable=True),
        sa.Column('sender_name', sa.String(255), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_claim_messages_claim_type', 'claim_messages', ['claim_id', 'message_type'])


def downgrade() -> None:
    """Drop warranty tables."""
    op.drop_index('idx_claim_messages_claim_type', table_name='claim_messages')
    op.drop_table('claim_messages')
    op.drop_index('idx_claims_submitted', table_name='claims')
    op.drop_index('idx_claims_homeowner_snapshot', table_name='claims')
    op.drop_index('idx_claims_status', table_name='claims')
    op.drop_table('claims')
    op.drop_index('idx_homeowners_name_address', table_name='homeowners')
    op.drop_index('idx_homeowners_builder_group', table_name='homeowners')
    op.drop_table('homeowners')
    op.drop_table('builder_groups')
