"""Appointment booking core for the BikeWerkstatt demo shop."""

__version__ = "0.1.0"
