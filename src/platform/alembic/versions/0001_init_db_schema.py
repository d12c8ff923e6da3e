"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- agencies: Agency tree (parent_agency_id, SET NULL on parent delete)
- users: Agency users, username unique per agency
- flight_groups: Group fare inventory owned by an agency
- group_seat_buckets: Per passenger type seat counters and fare
- seat_holds: Temporary seat reservations against a bucket

Note: seat counters are guarded by CHECK constraints so the database rejects
an overcommitted bucket even if application locking is bypassed.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, with_updated_at: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        )
    ]
    if with_updated_at:
        columns.append(
            sa.Column(
                'updated_at',
                sa.DateTime(timezone=True),
                server_default=sa.text('now()'),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Tenancy ==========

    op.create_table(
        'agencies',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('code', sa.String(length=30), nullable=False),
        sa.Column('parent_agency_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_agency_id'], ['agencies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )
    op.create_index(
        op.f('ix_agencies_parent_agency_id'), 'agencies', ['parent_agency_id'], unique=False
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agency_id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('agency_id', 'username', name='uq_users_agency_username'),
    )
    op.create_index(op.f('ix_users_agency_id'), 'users', ['agency_id'], unique=False)

    # ========== STEP 2: Flight groups ==========

    op.create_table(
        'flight_groups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agency_id', sa.Uuid(), nullable=False),
        sa.Column('carrier_code', sa.String(length=2), nullable=False),
        sa.Column('flight_number', sa.String(length=6), nullable=False),
        sa.Column('pnr_mode', sa.String(length=20), nullable=False),
        sa.Column('origin', sa.String(length=3), nullable=False),
        sa.Column('destination', sa.String(length=3), nullable=False),
        sa.Column('departure_time_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('arrival_time_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('departure_time_local', sa.DateTime(timezone=False), nullable=False),
        sa.Column('arrival_time_local', sa.DateTime(timezone=False), nullable=False),
        sa.Column('baggage_rule', sa.Text(), nullable=True),
        sa.Column('fare_notes', sa.Text(), nullable=True),
        sa.Column('terms', sa.Text(), nullable=True),
        sa.Column('sales_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('sales_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_flight_groups_agency_id'), 'flight_groups', ['agency_id'], unique=False)
    op.create_index(
        'ix_flight_groups_status_sales_window',
        'flight_groups',
        ['status', 'sales_start', 'sales_end'],
        unique=False,
    )
    op.create_index(
        'ix_flight_groups_route_departure',
        'flight_groups',
        ['origin', 'destination', 'departure_time_utc'],
        unique=False,
    )

    # ========== STEP 3: Inventory ==========

    op.create_table(
        'group_seat_buckets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('flight_group_id', sa.Uuid(), nullable=False),
        sa.Column('pax_type', sa.String(length=3), nullable=False),
        sa.Column('total_seats', sa.Integer(), nullable=False),
        sa.Column('seats_on_hold', sa.Integer(), nullable=False),
        sa.Column('seats_issued', sa.Integer(), nullable=False),
        sa.Column('base_fare', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('tax_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('fee_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['flight_group_id'], ['flight_groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('flight_group_id', 'pax_type', name='uq_group_seat_buckets_group_pax'),
        sa.CheckConstraint('total_seats >= 0', name='ck_group_seat_buckets_total_seats'),
        sa.CheckConstraint('seats_on_hold >= 0', name='ck_group_seat_buckets_seats_on_hold'),
        sa.CheckConstraint('seats_issued >= 0', name='ck_group_seat_buckets_seats_issued'),
        sa.CheckConstraint(
            'seats_on_hold + seats_issued <= total_seats', name='ck_group_seat_buckets_capacity'
        ),
        sa.CheckConstraint(
            'base_fare >= 0 AND tax_amount >= 0 AND fee_amount >= 0',
            name='ck_group_seat_buckets_amounts',
        ),
    )
    op.create_index(
        op.f('ix_group_seat_buckets_flight_group_id'),
        'group_seat_buckets',
        ['flight_group_id'],
        unique=False,
    )

    op.create_table(
        'seat_holds',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('seat_bucket_id', sa.Uuid(), nullable=False),
        sa.Column('flight_group_id', sa.Uuid(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('held_by', sa.Uuid(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated_at=False),
        sa.ForeignKeyConstraint(['seat_bucket_id'], ['group_seat_buckets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantity > 0', name='ck_seat_holds_quantity'),
    )
    op.create_index(
        op.f('ix_seat_holds_seat_bucket_id'), 'seat_holds', ['seat_bucket_id'], unique=False
    )
    op.create_index(
        op.f('ix_seat_holds_flight_group_id'), 'seat_holds', ['flight_group_id'], unique=False
    )
    # expiry sweep scans HELD holds ordered by expires_at
    op.create_index(
        'ix_seat_holds_status_expires_at', 'seat_holds', ['status', 'expires_at'], unique=False
    )


def downgrade() -> None:
    """Drop all tables in reverse order of creation."""

    # ========== STEP 3: Inventory (indexes dropped automatically) ==========
    op.drop_table('seat_holds')
    op.drop_table('group_seat_buckets')

    # ========== STEP 2 & 1: Flight groups and tenancy ==========
    op.drop_table('flight_groups')
    op.drop_table('users')
    op.drop_table('agencies')
