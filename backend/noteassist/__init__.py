"""
NoteAssist Backend — Application Package Initializer
=====================================================

What: Marks the `noteassist` directory as a Python package.
Why:  Enables module imports like `from noteassist.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered shape for both of its concerns:

    ┌─────────────────────────────────────┐
    │     Routes + auth (API Layer)       │  ← HTTP concerns, identity dependency
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Owner scoping, assist prompts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database / external providers      │  ← Async sessions, Google, LLM APIs
    └─────────────────────────────────────┘

    Routes never talk to the database or an AI SDK directly; they receive
    the verified identity and the service singletons through FastAPI's
    dependency injection.
"""

__version__ = "1.0.0"
