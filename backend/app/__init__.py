"""
DogAdopt Backend — Application Package Initializer
====================================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services + Access Guard           │  ← Orchestration, auth
    ├─────────────────────────────────────┤
    │   Domain rules (pure functions)     │  ← Adoption/removal transitions
    ├─────────────────────────────────────┤
    │   Repositories + Models             │  ← SQLAlchemy ORM, conditional writes
    ├─────────────────────────────────────┤
    │   Database handle                   │  ← Async engine + sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
