from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class FlightGroupModel(Base):
    __tablename__ = 'flight_groups'
    __table_args__ = (
        Index('ix_flight_groups_status_sales_window', 'status', 'sales_start', 'sales_end'),
        Index('ix_flight_groups_route_departure', 'origin', 'destination', 'departure_time_utc'),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    agency_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('agencies.id', ondelete='RESTRICT'), nullable=False, index=True
    )
    carrier_code: Mapped[str] = mapped_column(String(2), nullable=False)
    flight_number: Mapped[str] = mapped_column(String(6), nullable=False)
    pnr_mode: Mapped[str] = mapped_column(String(20), nullable=False)
    origin: Mapped[str] = mapped_column(String(3), nullable=False)
    destination: Mapped[str] = mapped_column(String(3), nullable=False)
    departure_time_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    arrival_time_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # wall-clock times at the airports, stored without zone
    departure_time_local: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    arrival_time_local: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    baggage_rule: Mapped[Optional[str]] = mapped_column(Text)
    fare_notes: Mapped[Optional[str]] = mapped_column(Text)
    terms: Mapped[Optional[str]] = mapped_column(Text)
    sales_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sales_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='DRAFT', nullable=False)
    created_by: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('users.id', ondelete='RESTRICT'), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return (
            f'<FlightGroupModel(id={self.id}, flight={self.carrier_code}{self.flight_number}, '
            f'status={self.status})>'
        )
