# fleetflow/routes/report.py
from typing import List
from fastapi import APIRouter

from fleetflow.deps import ConfigDep, CurrentSession, DatabaseDep
from fleetflow.schemas.report import AlertsReport, FleetKpis, MonthlyCost, PnlReport, VehicleCost
from fleetflow.services import reports

router = APIRouter()

@router.get("/reports/kpis", response_model=FleetKpis)
async def get_fleet_kpis(db: DatabaseDep, current: CurrentSession):
    return await reports.fleet_kpis(db)

@router.get("/reports/operational-costs", response_model=List[VehicleCost])
async def get_operational_costs(db: DatabaseDep, current: CurrentSession):
    return await reports.operational_costs(db)

@router.get("/reports/pnl", response_model=PnlReport)
async def get_vehicle_pnl(db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    """Revenue, cost, profit and ROI per vehicle, with fleet totals"""
    return await reports.vehicle_pnl(db, config)

@router.get("/reports/monthly-trend", response_model=List[MonthlyCost])
async def get_monthly_cost_trend(db: DatabaseDep, current: CurrentSession):
    return await reports.monthly_cost_trend(db)

@router.get("/reports/alerts", response_model=AlertsReport)
async def get_alerts(db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    return await reports.alerts(db, config)
