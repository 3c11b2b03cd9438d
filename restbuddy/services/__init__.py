# Services package init
"""
RestBuddy: Services Layer
===========================

What:  Everything between the HTTP route and the database query.

Service Inventory:
    - request_classifier: method + route shape → list/show/update/...
    - conditions:         query/path parameters → WHERE expression
    - query_options:      order, items/page pagination, QueryOptions
    - transformers:       ready-made condition transformers
    - dispatcher:         RequestDispatcher, runs the operation and responds

The first four are plain functions with no I/O; only the dispatcher talks
to the database.
"""
