"""
Schemas for raw TVmaze payloads.

Only the fields the pipeline consumes are declared; everything else is ignored.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class TvmazeShowRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class TvmazePerson(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    birthday: str | None = None


class TvmazeCastCredit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    person: TvmazePerson


SHOWS_PAGE_ADAPTER = TypeAdapter(list[TvmazeShowRecord])
CAST_ADAPTER = TypeAdapter(list[TvmazeCastCredit])
