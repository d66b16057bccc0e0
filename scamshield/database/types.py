"""
Column types that behave the same on PostgreSQL and SQLite.
"""

import uuid
from sqlalchemy import TypeDecorator, String
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID, JSONB as PostgresJSONB
from sqlalchemy.types import JSON


def new_id() -> str:
    return str(uuid.uuid4())


class UUID(TypeDecorator):
    """
    UUID column surfaced to Python as its canonical string form.

    Native UUID on PostgreSQL, CHAR(36) elsewhere. Identifiers cross the
    store boundary as plain strings, so binds accept either form.
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgresUUID(as_uuid=False))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return str(value)


class JSONB(TypeDecorator):
    """
    JSON document column.
    Native JSONB on PostgreSQL, JSON text elsewhere.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgresJSONB())
        return dialect.type_descriptor(JSON())
