"""
Declarative base for the costing catalog tables.

Every catalog row carries:
- an integer primary key, which the costing snapshot uses as its id
- a uuid string for references that must survive a re-seed
- created_at / updated_at audit timestamps (UTC)
"""

import uuid as uuid_lib
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, validates

from src.utils.datetime_utils import utc_now

Base = declarative_base()


def _json_safe(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


class BaseModel(Base):
    """Abstract parent of every catalog model."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    # String rather than a native UUID type; SQLite has none
    uuid = Column(
        String(36), unique=True, nullable=False, default=lambda: str(uuid_lib.uuid4()), index=True
    )

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self, include_relationships: bool = False) -> Dict[str, Any]:
        """
        Column values as a json.dumps()-ready dictionary.

        Datetimes become ISO strings and Decimals (money columns) become
        plain strings so no precision is lost.

        Args:
            include_relationships: Also serialize loaded relationships, one
                level deep (related rows are serialized without theirs)
        """
        result = {
            column.name: _json_safe(getattr(self, column.name))
            for column in self.__table__.columns
        }

        if include_relationships:
            for rel in self.__mapper__.relationships:
                related = getattr(self, rel.key)
                if related is None:
                    result[rel.key] = None
                elif rel.uselist:
                    result[rel.key] = [item.to_dict() for item in related]
                else:
                    result[rel.key] = related.to_dict()

        return result

    @validates("uuid")
    def _validate_uuid(self, _key: str, value: Any) -> str:
        return value if value is None else str(value)

    def __repr__(self) -> str:
        attrs = [f"id={self.id}"] if self.id is not None else []
        name = getattr(self, "name", None)
        if name is not None:
            attrs.append(f"name='{name}'")
        return f"{self.__class__.__name__}({', '.join(attrs)})"
