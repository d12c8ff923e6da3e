from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class SeatHoldModel(Base):
    __tablename__ = 'seat_holds'
    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_seat_holds_quantity'),
        Index('ix_seat_holds_status_expires_at', 'status', 'expires_at'),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    seat_bucket_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('group_seat_buckets.id', ondelete='CASCADE'), nullable=False, index=True
    )
    flight_group_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='HELD', nullable=False)
    held_by: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f'<SeatHoldModel(id={self.id}, quantity={self.quantity}, status={self.status})>'
