"""
RestBuddy: Middleware Package
===============================

Middleware Chain:
    Request → [Request context] → [GZip] → [CORS] → Route Handler

    The request context middleware runs outermost so every access line and
    every error envelope carries the request ID.
"""
