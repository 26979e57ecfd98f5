"""
Note Pad API: Application Package Initializer
=============================================

What: Marks the `notepad` directory as a Python package.
Why:  Enables module imports like `from notepad.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service is a thin stack of layers over a single `notes` table:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, status codes
    ├─────────────────────────────────────┤
    │         NoteService (CRUD)          │  ← Field validation, one SQL statement per call
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; the service never touches HTTP. The session
    factory is created at startup and handed down per request, so every
    layer can be exercised with a test double.
"""

__version__ = "1.0.0"
