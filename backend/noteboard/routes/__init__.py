# Routes package init
"""
NoteBoard — Routes Package
===========================

Route Inventory:
    - board.py:    GET /, POST /image, /notes, /notes/{id}/delete, /signout (HTML)
    - api.py:      /api/board JSON endpoints
    - storage.py:  GET /storage/{key}        (signed local blob downloads)
    - health.py:   GET /health               (store reachability)

Routes stay thin: they read the request, call one NoteBoard operation and
shape the response. Board behaviour lives in services/.
"""
