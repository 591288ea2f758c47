"""Key/value rows standing in for the browser's local storage."""

from __future__ import annotations

from sqlalchemy import Column, Text

from ..db.session import Base


class StoredValue(Base):
    """One JSON document per (owner, key), e.g. ``("local", "hackathon-budget")``."""

    __tablename__ = "local_storage"

    owner = Column(Text, primary_key=True)
    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["StoredValue"]
