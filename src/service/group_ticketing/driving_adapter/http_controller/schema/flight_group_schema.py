from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.group_ticketing.app.dto.flight_group_detail import FlightGroupDetail
from src.service.group_ticketing.app.dto.seat_bucket_spec import SeatBucketSpec
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.enum.pnr_mode import PnrMode
from src.service.group_ticketing.domain.value_object.fare_quote import FareQuote


class SeatBucketConfigRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'total_seats': 30,
                'base_fare': '450.00',
                'tax_amount': '62.30',
                'fee_amount': '15.00',
                'currency': 'USD',
            }
        }
    )

    total_seats: int = Field(..., ge=0)
    base_fare: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    tax_amount: Decimal = Field(Decimal('0.00'), ge=0, max_digits=10, decimal_places=2)
    fee_amount: Decimal = Field(Decimal('0.00'), ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(..., min_length=3, max_length=3)


class SeatBucketCreateRequest(SeatBucketConfigRequest):
    pax_type: PaxType

    def to_spec(self) -> SeatBucketSpec:
        return SeatBucketSpec(
            pax_type=self.pax_type,
            total_seats=self.total_seats,
            base_fare=self.base_fare,
            tax_amount=self.tax_amount,
            fee_amount=self.fee_amount,
            currency=self.currency,
        )


class FlightGroupCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'carrier_code': 'BR',
                'flight_number': '61',
                'origin': 'TPE',
                'destination': 'LHR',
                'departure_time_utc': '2026-12-01T15:40:00Z',
                'arrival_time_utc': '2026-12-02T05:10:00Z',
                'departure_time_local': '2026-12-01T23:40:00',
                'arrival_time_local': '2026-12-02T05:10:00',
                'sales_start': '2026-10-01T00:00:00Z',
                'sales_end': '2026-11-25T00:00:00Z',
                'pnr_mode': 'GROUP_PNR',
                'seat_buckets': [
                    {'pax_type': 'ADT', 'total_seats': 30, 'base_fare': '450.00', 'currency': 'USD'}
                ],
            }
        }
    )

    carrier_code: str = Field(..., min_length=2, max_length=2)
    flight_number: str = Field(..., min_length=1, max_length=6)
    origin: str = Field(..., min_length=3, max_length=3)
    destination: str = Field(..., min_length=3, max_length=3)
    departure_time_utc: datetime
    arrival_time_utc: datetime
    departure_time_local: datetime
    arrival_time_local: datetime
    sales_start: datetime
    sales_end: datetime
    pnr_mode: PnrMode = PnrMode.PER_BOOKING_PNR
    baggage_rule: Optional[str] = None
    fare_notes: Optional[str] = None
    terms: Optional[str] = None
    # ADMIN only; others always create for their own agency
    agency_id: Optional[UUID] = None
    seat_buckets: List[SeatBucketCreateRequest] = []


class FlightGroupStatusRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'status': 'PUBLISHED'}})

    status: FlightGroupStatus


class SeatBucketResponse(BaseModel):
    id: UUID
    pax_type: PaxType
    total_seats: int
    seats_on_hold: int
    seats_issued: int
    available_seats: int
    base_fare: Decimal
    tax_amount: Decimal
    fee_amount: Decimal
    unit_price: Decimal
    currency: str

    @classmethod
    def from_entity(cls, bucket: SeatBucket) -> 'SeatBucketResponse':
        return cls(
            id=bucket.id,
            pax_type=bucket.pax_type,
            total_seats=bucket.total_seats,
            seats_on_hold=bucket.seats_on_hold,
            seats_issued=bucket.seats_issued,
            available_seats=bucket.available_seats,
            base_fare=bucket.base_fare,
            tax_amount=bucket.tax_amount,
            fee_amount=bucket.fee_amount,
            unit_price=bucket.unit_price,
            currency=bucket.currency,
        )


class FlightGroupResponse(BaseModel):
    id: UUID
    agency_id: UUID
    carrier_code: str
    flight_number: str
    origin: str
    destination: str
    departure_time_utc: datetime
    arrival_time_utc: datetime
    departure_time_local: datetime
    arrival_time_local: datetime
    sales_start: datetime
    sales_end: datetime
    pnr_mode: PnrMode
    status: FlightGroupStatus
    baggage_rule: Optional[str] = None
    fare_notes: Optional[str] = None
    terms: Optional[str] = None
    created_by: UUID
    seat_buckets: List[SeatBucketResponse] = []

    @classmethod
    def from_detail(cls, detail: FlightGroupDetail) -> 'FlightGroupResponse':
        group = detail.flight_group
        return cls(
            id=group.id,
            agency_id=group.agency_id,
            carrier_code=group.carrier_code,
            flight_number=group.flight_number,
            origin=group.origin,
            destination=group.destination,
            departure_time_utc=group.departure_time_utc,
            arrival_time_utc=group.arrival_time_utc,
            departure_time_local=group.departure_time_local,
            arrival_time_local=group.arrival_time_local,
            sales_start=group.sales_start,
            sales_end=group.sales_end,
            pnr_mode=group.pnr_mode,
            status=group.status,
            baggage_rule=group.baggage_rule,
            fare_notes=group.fare_notes,
            terms=group.terms,
            created_by=group.created_by,
            seat_buckets=[SeatBucketResponse.from_entity(b) for b in detail.buckets],
        )


class FareQuoteRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'ADT': 20, 'CHD': 4, 'INF': 1}})

    ADT: int = Field(0, ge=0)
    CHD: int = Field(0, ge=0)
    INF: int = Field(0, ge=0)

    def passengers(self) -> Dict[PaxType, int]:
        return {PaxType.ADT: self.ADT, PaxType.CHD: self.CHD, PaxType.INF: self.INF}


class FareQuoteLineResponse(BaseModel):
    pax_type: PaxType
    quantity: int
    seats_available: int
    unit_base_fare: Decimal
    unit_tax_amount: Decimal
    unit_fee_amount: Decimal
    unit_price: Decimal
    base_total: Decimal
    tax_total: Decimal
    fee_total: Decimal
    total: Decimal


class FareQuoteResponse(BaseModel):
    flight_group_id: UUID
    currency: str
    passenger_count: int
    lines: List[FareQuoteLineResponse]
    base_total: Decimal
    tax_total: Decimal
    fee_total: Decimal
    grand_total: Decimal

    @classmethod
    def from_quote(cls, *, flight_group_id: UUID, quote: FareQuote) -> 'FareQuoteResponse':
        return cls(
            flight_group_id=flight_group_id,
            currency=quote.currency,
            passenger_count=quote.passenger_count,
            lines=[
                FareQuoteLineResponse(
                    pax_type=line.pax_type,
                    quantity=line.quantity,
                    seats_available=line.seats_available,
                    unit_base_fare=line.unit_base_fare,
                    unit_tax_amount=line.unit_tax_amount,
                    unit_fee_amount=line.unit_fee_amount,
                    unit_price=line.unit_price,
                    base_total=line.base_total,
                    tax_total=line.tax_total,
                    fee_total=line.fee_total,
                    total=line.total,
                )
                for line in quote.lines
            ],
            base_total=quote.base_total,
            tax_total=quote.tax_total,
            fee_total=quote.fee_total,
            grand_total=quote.grand_total,
        )
