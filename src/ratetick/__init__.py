# src/ratetick/__init__.py
"""
RateTick - Exchange Rate Tick Ingestion and Query Engine

Periodically fetches market exchange rates for a fixed set of currency pairs
from an external quote source, stores every observation as a timestamped tick,
and serves trailing-24h and calendar-day reads per pair.
"""

__version__ = "1.0.0"
__author__ = "Masih Sadri"
