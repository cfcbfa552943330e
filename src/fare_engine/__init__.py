"""Fare-pricing engine for luxury ground transportation bookings."""

__version__ = "0.1.0"
