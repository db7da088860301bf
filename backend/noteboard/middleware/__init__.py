# Middleware package init
"""
NoteBoard — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Session] → [Logging] → [GZip] → [CORS] → Route

    1. Request ID first: every later log line and error body can carry it
    2. Session: Starlette SessionMiddleware decodes the signed cookie that
       carries the board id the logger and routes read
    3. Logging: records status and duration once the route has answered
"""
