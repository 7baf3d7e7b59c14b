"""
repositories/ - Data Access Layer
==================================
Runs synthesized SQL through the connection pool.
Repositories receive raw rows from the database and return generic JSON rows.
"""
