"""
RestBuddy: Generic REST Handlers for SQLAlchemy Models
========================================================

What:  Serves `GET /{resource}`, `GET /{resource}/{id}` and
       `PUT|PATCH /{resource}/{id}` for any registered model, with filtering,
       ordering and pagination taken from the query string.

    ┌─────────────────────────────────────┐
    │      Routes (resources.py)          │  ← registers dispatcher endpoints
    ├─────────────────────────────────────┤
    │      RequestDispatcher              │  ← classify, build query, execute
    ├─────────────────────────────────────┤
    │      ResourceRegistry + Models      │  ← resource name → typed schema
    ├─────────────────────────────────────┤
    │      Database (async sessions)      │
    └─────────────────────────────────────┘

Minimal use:

    registry = ResourceRegistry()
    registry.register(User)
    dispatcher = RequestDispatcher(registry)
    resources(app, dispatcher, "users")
"""

__version__ = "1.0.0"
