# Routes package init
"""
TIL Backend — API Routes Package
=================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - acronyms.py:    /api/acronyms/      CRUD, search, first, sorted,
                                          owner and category links
    - users.py:       /api/users/         registration, reads, login
    - categories.py:  /api/categories/    creation and reads
    - health.py:      GET /health         service health check

Design Principle:
    Routes are thin: extract request data, call a service, shape the
    response. Business logic and queries live in services.
"""
