"""
MindEase Backend — Application Package
========================================

Backend for the MindEase student discussion and messaging app.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (resources + aggregation)│  ← validation, fan-out joins
    ├─────────────────────────────────────┤
    │     Storage (DataStore adapter)     │  ← records in, records out
    ├─────────────────────────────────────┤
    │   Database (engine, pool, models)   │  ← async SQLAlchemy
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
