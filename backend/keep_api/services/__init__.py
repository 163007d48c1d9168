"""
Keep API — Services Layer
===========================

Business logic between the routes (HTTP) and the database.

Service Inventory:
    - NoteService:      notes CRUD
    - PageService:      pages CRUD, homepage lookup, transactional reorder
    - CredentialStore:  admin users, bcrypt hashes, login checks
    - validation:       allow-list check shared by the partial updates

Services receive the request's AsyncSession and raise KeepError subclasses;
they never build HTTP responses.
"""
