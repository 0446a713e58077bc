# Middleware package init
"""
NoteAssist Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first so every later log line carries it
    2. Logging measures the full handler duration
    3. CORS answers preflight OPTIONS for the configured origins

Authentication is not middleware: it is a route dependency, so open routes
(/api/test, /health, and /api/ai/* when AI_REQUIRE_AUTH is off) never see it.
"""
