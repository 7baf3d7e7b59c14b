"""
models/ - Domain Models
=======================
Column metadata, table descriptors and the schema catalog.
Plain immutable data; no database access happens here.
"""
