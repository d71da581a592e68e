# Services package init
"""
MarkNote — Services Layer
==========================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - NoteService: note validation, CRUD and search over the `notes` table
    - MarkdownService: server-side Markdown → HTML for the detail page
"""
