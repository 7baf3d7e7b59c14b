"""
db/ - Database Layer
====================
Owns the PostgreSQL connection pool and discovers the schema at startup.
This layer is the lowest in the architecture and only depends on models/.
"""
