from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class SeatBucketModel(Base):
    __tablename__ = 'group_seat_buckets'
    __table_args__ = (
        UniqueConstraint('flight_group_id', 'pax_type', name='uq_group_seat_buckets_group_pax'),
        CheckConstraint('total_seats >= 0', name='ck_group_seat_buckets_total_seats'),
        CheckConstraint('seats_on_hold >= 0', name='ck_group_seat_buckets_seats_on_hold'),
        CheckConstraint('seats_issued >= 0', name='ck_group_seat_buckets_seats_issued'),
        CheckConstraint(
            'seats_on_hold + seats_issued <= total_seats', name='ck_group_seat_buckets_capacity'
        ),
        CheckConstraint(
            'base_fare >= 0 AND tax_amount >= 0 AND fee_amount >= 0',
            name='ck_group_seat_buckets_amounts',
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    flight_group_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('flight_groups.id', ondelete='CASCADE'), nullable=False, index=True
    )
    pax_type: Mapped[str] = mapped_column(String(3), nullable=False)
    total_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_on_hold: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    seats_issued: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    base_fare: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal('0.00'), nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal('0.00'), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return (
            f'<SeatBucketModel(id={self.id}, pax_type={self.pax_type}, total={self.total_seats}, '
            f'on_hold={self.seats_on_hold}, issued={self.seats_issued})>'
        )
