"""
Keep API — Application Package
================================

Backend for the Keep notes app and its small CMS.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (AuthGate, TokenService) │  ← admin routes only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← SQL, error translation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
