# Routes package init
"""
MarkNote — Routes Package
==========================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   the note actions (list, show, new, create, edit, update,
                  destroy), registered from an explicit dispatch table
    - health.py:  GET /health (service health check)

Design Principle:
    Routes are THIN — they handle HTTP concerns only:
    - Extract data from the request (query params, form fields, path ids)
    - Call NoteService
    - Render a template or redirect with the right status code
"""
