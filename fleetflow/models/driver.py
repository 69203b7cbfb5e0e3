# fleetflow/models/driver.py
from datetime import date, datetime
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel, as_date
from .enums import DriverCategory, DriverStatus, normalize_token

class DriverModel(DocumentModel):
    name: str
    license_number: str
    license_expiry: date
    category: DriverCategory = DriverCategory.truck
    status: DriverStatus = DriverStatus.available
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("category", "status", mode="before")
    @classmethod
    def normalize_enums(cls, v):
        return normalize_token(v)

    @field_validator("license_expiry", mode="before")
    @classmethod
    def expiry_as_date(cls, v):
        return as_date(v)

    def license_expired(self, today: date) -> bool:
        return self.license_expiry < today
