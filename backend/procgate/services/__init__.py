"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services own IO sequencing; decisions stay in core/
    - Collaborators (DB session, executor, upstream client, store) are injected

Design Decisions:
    - Imperative shell around a functional core (ADR: ExMA impureim sandwich)
"""
