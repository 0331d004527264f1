"""Custom SQLAlchemy column types shared by the record models."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.types import String, TypeDecorator

IDENTIFIER_LENGTH = 64


class Identifier(TypeDecorator):
    """Text identifier accepting both server UUIDs and browser generated ids.

    Records imported from a local-storage backup carry ids such as
    ``template-1712345678`` or ``monthly-earnings`` that are not UUIDs, so the
    column is a bounded string on every engine. Values are normalised to
    stripped strings in both directions.
    """

    impl = String(IDENTIFIER_LENGTH)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value).strip()

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)


def new_identifier() -> str:
    return str(uuid.uuid4())
