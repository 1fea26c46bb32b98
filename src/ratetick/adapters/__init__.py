# src/ratetick/adapters/__init__.py
"""
Adapters Layer - External System Integrations

This package contains adapters for external systems:
- Rate source APIs (providers)
- SQL storage (persistence)
- Query surface payloads (api)
"""
