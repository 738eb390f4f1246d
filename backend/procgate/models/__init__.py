"""ORM Models — SQLAlchemy declarative models for gateway metadata.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all/alembic
"""

from procgate.models.api_definition import ApiDefinition  # noqa: F401
