"""procgate — metadata-driven stored-procedure execution gateway.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
