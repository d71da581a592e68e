"""
MarkNote — Application Package Initializer
===========================================

What: Marks the `marknote` directory as a Python package.
Why:  Enables module imports like `from marknote.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The application follows a layered Model-View-Controller layout:

    ┌─────────────────────────────────────┐
    │   Routes + Templates (Web Layer)    │  ← HTTP, forms, redirects, HTML
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, search, rendering
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; they build a `NoteInput` and hand it
    to `NoteService`, which owns every read and write against the `notes` table.
"""

__version__ = "1.0.0"
