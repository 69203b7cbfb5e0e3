# fleetflow/models/trip.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel
from .enums import TripStatus, normalize_token

UNASSIGNED_DRIVER = "Unassigned"

class TripModel(DocumentModel):
    origin: str
    destination: str
    cargo_weight: float
    freight_amount: float = 0
    vehicle_id: str
    vehicle_name: str = ""
    driver_id: Optional[str] = None
    driver_name: str = UNASSIGNED_DRIVER
    status: TripStatus = TripStatus.draft
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return normalize_token(v)

    @property
    def is_open(self) -> bool:
        return self.status in (TripStatus.draft, TripStatus.dispatched)
