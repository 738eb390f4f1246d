"""Declarative Base — metadata shared by the ORM models and Alembic.

Constraint and index names follow one convention so migrations produce the same
names on every MySQL server. Explicitly named constraints (uq_GenericApi) keep
their own name.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
