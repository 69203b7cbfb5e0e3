# fleetflow/services/reports.py
"""Read-only aggregates over trips, vehicles and cost logs.

Figures are computed in Python from full collection reads, matching what the
dashboard needs; nothing here writes.
"""
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.models.enums import MaintenanceStatus, TripStatus, VehicleStatus
from fleetflow.models.system_config import SystemConfig
from fleetflow.schemas.report import (
    AlertsReport,
    FleetKpis,
    LicenseAlert,
    MaintenanceReminder,
    MonthlyCost,
    PnlReport,
    PnlTotals,
    VehicleCost,
    VehiclePnl,
)

TREND_MONTHS = 6


def _percent(part: float, whole: float) -> int:
    return round(part / whole * 100) if whole else 0


def _sum_by_vehicle(logs) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for log in logs:
        totals[log.vehicle_id] += log.cost or 0
    return totals


async def fleet_kpis(db: AsyncIOMotorDatabase) -> FleetKpis:
    trips = await crud.trip.get_multi(db)
    vehicles = await crud.vehicle.get_multi(db)
    fuel_logs = await crud.fuel_log.get_multi(db)
    maintenance_logs = await crud.maintenance_log.get_multi(db)

    active = len([t for t in trips if t.status == TripStatus.dispatched])
    completed = len([t for t in trips if t.status == TripStatus.completed])
    return FleetKpis(
        active_fleet=active,
        total_shipments=len(trips),
        pending_cargo=len([t for t in trips if t.status == TripStatus.draft]),
        completed_trips=completed,
        maintenance_alerts=len([v for v in vehicles if v.status == VehicleStatus.in_shop]),
        total_vehicles=len(vehicles),
        utilization_rate=_percent(active, len(vehicles)),
        total_operational_cost=sum(f.cost for f in fuel_logs) + sum(m.cost for m in maintenance_logs),
        completion_rate=_percent(completed, len(trips)),
    )


async def operational_costs(db: AsyncIOMotorDatabase) -> List[VehicleCost]:
    vehicles = await crud.vehicle.get_multi(db, sort=[("name", 1)])
    fuel = _sum_by_vehicle(await crud.fuel_log.get_multi(db))
    maintenance = _sum_by_vehicle(await crud.maintenance_log.get_multi(db))

    return [
        VehicleCost(
            vehicle_id=v.id,
            name=v.name,
            license_plate=v.license_plate,
            fuel_cost=fuel[v.id],
            maintenance_cost=maintenance[v.id],
            total_cost=fuel[v.id] + maintenance[v.id],
        )
        for v in vehicles
    ]


async def vehicle_pnl(db: AsyncIOMotorDatabase, config: SystemConfig) -> PnlReport:
    vehicles = await crud.vehicle.get_multi(db, sort=[("name", 1)])
    completed = await crud.trip.get_multi(db, query={"status": TripStatus.completed})
    fuel = _sum_by_vehicle(await crud.fuel_log.get_multi(db))
    maintenance = _sum_by_vehicle(await crud.maintenance_log.get_multi(db))

    revenue: Dict[str, float] = defaultdict(float)
    for t in completed:
        revenue[t.vehicle_id] += t.freight_amount or 0

    rows = []
    totals = PnlTotals()
    for v in vehicles:
        acquisition_cost = v.acquisition_cost or config.acquisition_cost_default
        profit = revenue[v.id] - (fuel[v.id] + maintenance[v.id])
        roi = None
        if config.enable_roi:
            roi = round(profit / acquisition_cost * 100, 1) if acquisition_cost > 0 else 0.0
        rows.append(VehiclePnl(
            vehicle_id=v.id,
            name=v.name,
            revenue=revenue[v.id],
            fuel_cost=fuel[v.id],
            maintenance_cost=maintenance[v.id],
            profit=profit,
            acquisition_cost=acquisition_cost,
            roi=roi,
        ))
        totals.revenue += revenue[v.id]
        totals.fuel_cost += fuel[v.id]
        totals.maintenance_cost += maintenance[v.id]
        totals.profit += profit

    if config.enable_roi and rows:
        totals.average_roi = round(sum(r.roi for r in rows) / len(rows), 1)
    return PnlReport(currency=config.currency, vehicles=rows, totals=totals)


def _last_months(today: date, count: int) -> List[str]:
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


async def monthly_cost_trend(db: AsyncIOMotorDatabase, today: Optional[date] = None) -> List[MonthlyCost]:
    """Fuel and maintenance spend for each of the last six calendar months, oldest first."""
    months = _last_months(today or date.today(), TREND_MONTHS)
    fuel: Dict[str, float] = defaultdict(float)
    maintenance: Dict[str, float] = defaultdict(float)

    for f in await crud.fuel_log.get_multi(db):
        fuel[f.date.strftime("%Y-%m")] += f.cost
    for m in await crud.maintenance_log.get_multi(db):
        if m.created_at:
            maintenance[m.created_at.strftime("%Y-%m")] += m.cost

    return [
        MonthlyCost(
            month=month,
            fuel_cost=fuel[month],
            maintenance_cost=maintenance[month],
            cost=fuel[month] + maintenance[month],
        )
        for month in months
    ]


async def alerts(db: AsyncIOMotorDatabase, config: SystemConfig, today: Optional[date] = None) -> AlertsReport:
    today = today or date.today()

    license_expiring = []
    for d in await crud.driver.get_multi(db, sort=[("license_expiry", 1)]):
        days_left = (d.license_expiry - today).days
        if days_left <= config.license_expiry_alert_days:
            license_expiring.append(LicenseAlert(
                driver_id=d.id, name=d.name, license_expiry=d.license_expiry, days_left=days_left
            ))

    overdue = []
    open_logs = await crud.maintenance_log.get_multi(
        db, query={"status": MaintenanceStatus.in_progress}, sort=[("created_at", 1)]
    )
    for log in open_logs:
        if not log.created_at:
            continue
        days_open = (today - log.created_at.date()).days
        if days_open > config.maintenance_reminder_days:
            overdue.append(MaintenanceReminder(
                log_id=log.id,
                vehicle_id=log.vehicle_id,
                vehicle_name=log.vehicle_name,
                service_type=log.service_type.value,
                days_open=days_open,
            ))

    return AlertsReport(license_expiring=license_expiring, maintenance_overdue=overdue)
