"""
Custom SQLAlchemy types for cross-database compatibility.
"""
import enum
import json
from datetime import datetime, timezone

from sqlalchemy import String, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB as PostgreSQLJSONB


def utcnow() -> datetime:
    """Current UTC time, naive, as every timestamp column stores it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LowercaseEnum(TypeDecorator):
    """
    Enumerated column (status, role) stored as a fixed lowercase string.

    Values are normalized at write time ("PENDING" -> "pending") so reads
    never need case-insensitive comparisons. Loaded values come back as
    members of the bound enum.
    """
    impl = String
    cache_ok = True

    def __init__(self, enum_cls: type[enum.Enum], *args, **kwargs):
        super().__init__(20, *args, **kwargs)
        self.enum_cls = enum_cls

    def coerce(self, value):
        if value is None or isinstance(value, self.enum_cls):
            return value
        try:
            return self.enum_cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in self.enum_cls)
            raise ValueError(f"Invalid status {value!r}. Allowed: {allowed}")

    def process_bind_param(self, value, dialect):
        value = self.coerce(value)
        return value.value if value is not None else None

    def process_result_value(self, value, dialect):
        return self.coerce(value)


class StringList(TypeDecorator):
    """
    Ordered list of strings.

    Uses PostgreSQL's JSONB type when available, otherwise uses
    TEXT for SQLite and stores as JSON string.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgreSQLJSONB())
        else:
            return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        items = [str(item) for item in value]
        if dialect.name == 'postgresql':
            return items
        return json.dumps(items)

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        if dialect.name == 'postgresql':
            return list(value)
        return json.loads(value)
