"""
Transporter Backend — Application Package Initializer
======================================================

What: Marks the `transporter` directory as a Python package.
Why:  Enables module imports like `from transporter.config import load_settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest,
      and the `transporter` console script.

Architecture Note:
    The service is a thin layered CRUD backend for drivers and trucks:

    ┌─────────────────────────────────────┐
    │     Server Lifecycle (uvicorn)      │  ← bind, serve, signal, shutdown
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Handlers)         │  ← query + not-found/conflict rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine handle
    └─────────────────────────────────────┘

    The database handle is created once by the entry point and passed into
    the application factory; nothing below the entry point reaches for a
    module-level connection.
"""

__version__ = "1.0.0"
