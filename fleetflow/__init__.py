# fleetflow package
