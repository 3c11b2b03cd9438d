# Routes package init
"""
RestBuddy: API Routes Package
===============================

Route Inventory:
    - resources.py:  GET|PATCH|PUT /{resource}/{id}, GET /{resource}
                     (endpoints built by the RequestDispatcher)
    - health.py:     GET /health

Routes stay thin: every resource route delegates to the dispatcher.
"""
