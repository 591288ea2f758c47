"""Shared pydantic base for every record and payload.

Field names are snake_case (the hosted table columns); the camelCase aliases
are what local storage, backup files and the JSON API use.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class Record(CamelModel):
    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=utc_now_iso)
