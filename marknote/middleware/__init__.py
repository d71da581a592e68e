"""
MarkNote — Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Method Override] → [Session] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: one access-log line per request, with the request ID
    3. Method Override: turns `POST ?_method=DELETE` from an HTML form into DELETE
    4. Session: signed cookie carrying flash notices (Starlette SessionMiddleware)
"""
