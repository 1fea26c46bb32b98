# src/ratetick/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the application services that orchestrate domain
logic: the ingestion cycle and the windowed rate queries.
"""

from ratetick.application.ingestion_service import IngestionService
from ratetick.application.query_service import RateQueryService

__all__ = [
    "IngestionService",
    "RateQueryService",
]
