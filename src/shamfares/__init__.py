"""Fare aggregation, price calendars and search proxy for Damascus/Aleppo flights."""

__version__ = "0.1.0"
