"""Custom SQLAlchemy types shared by the models."""

from __future__ import annotations

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.types import TypeDecorator


class StringList(TypeDecorator):
    """Ordered list of strings.

    Native TEXT[] on PostgreSQL, JSON everywhere else. Order and contents are
    stored exactly as given.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(Text))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return [str(item) for item in value]

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return list(value)
