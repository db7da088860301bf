"""
NoteBoard — Application Package Initializer
============================================

What: Marks the `noteboard` directory as a Python package.
Who:  Imported by uvicorn, Alembic, pytest and the `noteboard` console script.

Architecture Note:
    The application is a thin presentation layer over two remote stores:

    ┌─────────────────────────────────────┐
    │     Routes (HTML page + JSON API)   │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   NoteBoard (per-session orchestr.) │  ← effects against the stores
    ├─────────────────────────────────────┤
    │   Board state (pure transitions)    │  ← (state, event) → (state', effects)
    ├─────────────────────────────────────┤
    │   Record Store    │   Blob Store    │  ← GraphQL / SQL │ local / HTTP
    └─────────────────────────────────────┘

    The stores own all durable state. The board holds a cached copy of the
    note list and the transient form.
"""

__version__ = "1.0.0"
