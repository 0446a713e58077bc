# Routes package init
"""
NoteAssist Backend — API Routes Package
=========================================

Route Inventory:
    - notes.py:   GET/POST /api/notes, GET/PUT/DELETE /api/notes/{id}
    - assist.py:  POST /api/ai/summarize, /api/ai/improve, /api/ai/ideas
    - health.py:  GET /health, GET /api/test

Design Principle:
    Routes are THIN: they resolve dependencies (identity, db session,
    provider), call a service, and pick the status code. Errors are raised
    as NoteAssistError subclasses and formatted by the global handlers.
"""
