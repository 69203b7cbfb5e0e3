# fleetflow/schemas/system_config.py
from typing import Optional
from pydantic import BaseModel

class SystemConfigUpdate(BaseModel):
    company_name: Optional[str] = None
    currency: Optional[str] = None
    default_region: Optional[str] = None
    acquisition_cost_default: Optional[float] = None
    rate_per_kg: Optional[float] = None
    auto_reset_driver: Optional[bool] = None
    block_expired_license: Optional[bool] = None
    prevent_overload: Optional[bool] = None
    enable_roi: Optional[bool] = None
    require_driver: Optional[bool] = None
    require_maintenance: Optional[bool] = None
    allow_cancel_after_dispatch: Optional[bool] = None
    license_expiry_alert_days: Optional[int] = None
    maintenance_reminder_days: Optional[int] = None
