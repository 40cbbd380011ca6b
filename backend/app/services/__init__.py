# Services package init
"""
TIL Backend — Services Layer
=============================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services take the request's AsyncSession plus validated schemas and
       return response schemas. Each is a stateless module-level singleton.

Service Inventory:
    - AcronymService:      Single-acronym create/get/update/delete
    - SearchService:       list_all, search, first, sorted
    - RelationshipService: Category attach/detach/list, acronym owner
    - UserService:         User registration and reads
    - CategoryService:     Category creation and reads
    - AuthService:         Password hashing, login, bearer-token lookup
"""
