# fleetflow/schemas/report.py
from datetime import date
from typing import List, Optional
from pydantic import BaseModel

class FleetKpis(BaseModel):
    """Dashboard headline figures"""
    active_fleet: int
    total_shipments: int
    pending_cargo: int
    completed_trips: int
    maintenance_alerts: int
    total_vehicles: int
    utilization_rate: int
    total_operational_cost: float
    completion_rate: int

class VehicleCost(BaseModel):
    vehicle_id: str
    name: str
    license_plate: str
    fuel_cost: float
    maintenance_cost: float
    total_cost: float

class VehiclePnl(BaseModel):
    vehicle_id: str
    name: str
    revenue: float
    fuel_cost: float
    maintenance_cost: float
    profit: float
    acquisition_cost: float
    roi: Optional[float] = None  # percent; None when ROI reporting is disabled

class PnlTotals(BaseModel):
    revenue: float = 0
    fuel_cost: float = 0
    maintenance_cost: float = 0
    profit: float = 0
    average_roi: Optional[float] = None

class PnlReport(BaseModel):
    currency: str
    vehicles: List[VehiclePnl]
    totals: PnlTotals

class MonthlyCost(BaseModel):
    month: str  # YYYY-MM
    fuel_cost: float
    maintenance_cost: float
    cost: float

class LicenseAlert(BaseModel):
    driver_id: str
    name: str
    license_expiry: date
    days_left: int  # negative once expired

class MaintenanceReminder(BaseModel):
    log_id: str
    vehicle_id: str
    vehicle_name: str
    service_type: str
    days_open: int

class AlertsReport(BaseModel):
    license_expiring: List[LicenseAlert]
    maintenance_overdue: List[MaintenanceReminder]
