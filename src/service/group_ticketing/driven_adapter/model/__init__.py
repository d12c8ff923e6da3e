"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.group_ticketing.driven_adapter.model.agency_model import AgencyModel
from src.service.group_ticketing.driven_adapter.model.audit_log_model import AuditLogModel
from src.service.group_ticketing.driven_adapter.model.flight_group_model import FlightGroupModel
from src.service.group_ticketing.driven_adapter.model.seat_bucket_model import SeatBucketModel
from src.service.group_ticketing.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.group_ticketing.driven_adapter.model.user_model import UserModel

__all__ = [
    'AgencyModel',
    'AuditLogModel',
    'FlightGroupModel',
    'SeatBucketModel',
    'SeatHoldModel',
    'UserModel',
]
