"""
Vetlyst Backend — Application Package Initializer
==================================================

What: Marks the `vetlyst` directory as a Python package.
Why:  Enables module imports like `from vetlyst.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split everywhere:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Slugs, submissions, notifications
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never talk to Resend or build SQL themselves; services never
    look at HTTP status codes.
"""

__version__ = "1.0.0"
