"""
handlers/ - Presentation Layer
================================
FastAPI routes. Each route receives the parsed table name, row id, query
parameters and body, delegates to TableService, and returns its result.
No business logic lives here.
"""
