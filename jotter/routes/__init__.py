"""
Jotter: Routes Package
========================

Route Inventory:
    - notes.py:   GET/POST /, /new, /note/{slug}, /note/delete/{slug}
    - health.py:  GET /health
    - /static is a StaticFiles mount registered in main.py

Routes stay thin: read the request, call the store, render or redirect.
"""
