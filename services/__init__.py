"""
services/ - Query Engine
========================
Value codec, payload reconciliation, SQL synthesis and the per-verb
operations that tie them together.
"""
