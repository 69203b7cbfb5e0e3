# fleetflow/services/__init__.py
from .system_config import settings_provider
from .trips import TripLifecycle
from .compliance import ComplianceWatcher, run_compliance_sweep

__all__ = [
    'settings_provider',
    'TripLifecycle',
    'ComplianceWatcher',
    'run_compliance_sweep',
]
