# Services package init
"""
Note Pad API: Services Layer
==============================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle validation and SQL.

Service Inventory:
    - NoteService: create / get / list / update / delete over the notes table
"""
