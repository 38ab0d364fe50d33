from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


class ShowRecordError(ValueError):
    pass


@dataclass(frozen=True)
class CastMember:
    id: int
    name: str
    birthday: str | None = None  # YYYY-MM-DD as returned upstream

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "birthday": self.birthday}

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> CastMember:
        try:
            return cls(id=int(row["id"]), name=str(row["name"]), birthday=row.get("birthday"))
        except (KeyError, TypeError, ValueError) as exc:
            raise ShowRecordError(f"Invalid stored cast member: {row!r}") from exc


@dataclass(frozen=True)
class Show:
    """
    A catalog show as persisted under the `shows` key.

    `cast is None` means cast has not been fetched yet; an empty list means the
    show was fetched and has no cast.
    """

    id: int
    name: str
    cast: tuple[CastMember, ...] | None = None

    @property
    def needs_cast(self) -> bool:
        return self.cast is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cast": None if self.cast is None else [member.to_dict() for member in self.cast],
        }

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> Show:
        if not isinstance(row, Mapping):
            raise ShowRecordError(f"Invalid stored show: {row!r}")
        raw_cast = row.get("cast")
        cast: tuple[CastMember, ...] | None = None
        if isinstance(raw_cast, list):
            cast = tuple(CastMember.from_dict(member) for member in raw_cast)
        try:
            return cls(id=int(row["id"]), name=str(row["name"]), cast=cast)
        except (KeyError, TypeError, ValueError) as exc:
            raise ShowRecordError(f"Invalid stored show: {row!r}") from exc
