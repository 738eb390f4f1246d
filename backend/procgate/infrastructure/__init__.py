"""Infrastructure Layer — database, upstream HTTP client, session store, and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping into core/errors.py types

Design Decisions:
    - Thin wrappers over raw clients (ADR: ExMA single responsibility)
"""
