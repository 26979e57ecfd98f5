# Routes package init
"""
Note Pad API: API Routes Package
==================================

Route Inventory (all under settings.api_prefix, default /api/v1):
    - notes.py:   POST/GET /notes, GET/PUT/PATCH/DELETE /notes/{id}
    - health.py:  GET /healthcheck

Routes stay THIN: parse the request, call NoteService, choose the status
code. Validation, SQL and error mapping happen elsewhere.
"""
