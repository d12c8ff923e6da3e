"""add_audit_logs

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18

Schema:
- audit_logs: Append-only trail of flight group transitions and seat hold changes
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agency_id', sa.Uuid(), nullable=False),
        sa.Column('actor_user_id', sa.Uuid(), nullable=True),  # NULL for the expiry sweep
        sa.Column('entity_type', sa.String(length=20), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=40), nullable=False),
        sa.Column('old_values', JSONB, nullable=True),
        sa.Column('new_values', JSONB, nullable=True),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_logs_agency_id'), 'audit_logs', ['agency_id'], unique=False)
    op.create_index(
        'ix_audit_logs_entity', 'audit_logs', ['entity_type', 'entity_id'], unique=False
    )
    op.create_index(
        'ix_audit_logs_actor_occurred_at',
        'audit_logs',
        ['actor_user_id', 'occurred_at'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table('audit_logs')
