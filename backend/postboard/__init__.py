"""
Postboard Backend: Application Package
========================================

A small posts CRUD service with a comments preview page.

    ┌─────────────────────────────────────┐
    │  main (entry dispatcher)            │  /api/* vs everything else
    ├─────────────────────────────────────┤
    │  api + routes (HTTP layer)          │  auth, envelopes, status codes
    ├─────────────────────────────────────┤
    │  services (operations)              │  Result values, no HTTP
    ├─────────────────────────────────────┤
    │  models & schemas / database        │  SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
