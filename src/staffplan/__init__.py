"""
staffplan - Resource planning analytics

This package contains the staffplan backend services:
- api: FastAPI REST endpoints
- engine: utilization, capacity, recommendation and suggestion scoring
- storage: record store contract and SQLAlchemy-backed implementation
- domain: read-only snapshot records handed to the engine
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
