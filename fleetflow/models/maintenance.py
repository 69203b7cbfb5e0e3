# fleetflow/models/maintenance.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel
from .enums import MaintenanceStatus, ServiceType, normalize_token

class MaintenanceLogModel(DocumentModel):
    vehicle_id: str
    vehicle_name: str = ""
    service_type: ServiceType
    description: str
    cost: float = 0
    status: MaintenanceStatus = MaintenanceStatus.in_progress
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("service_type", "status", mode="before")
    @classmethod
    def normalize_enums(cls, v):
        return normalize_token(v)
