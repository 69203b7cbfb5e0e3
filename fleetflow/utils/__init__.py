# fleetflow/utils/__init__.py
