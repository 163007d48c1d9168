"""
Keep API — Routes Package
===========================

Route Inventory:
    - notes.py:        /notes, /note, /note/{id}         (public notes CRUD)
    - pages.py:        /homepage, /pages, /page/{id}     (public page reads)
    - auth.py:         /register, /login
    - admin_pages.py:  /admin/pages, /admin/pages/reorder, /admin/page[/{id}]
    - health.py:       /, /health

Routes stay thin: extract input, call a service, shape the response.
"""
