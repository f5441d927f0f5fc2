from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Anime:
    name: str
    id: int | None = None

    def with_id(self, anime_id: int) -> Anime:
        return replace(self, id=anime_id)

    def with_name(self, name: str) -> Anime:
        return replace(self, name=name)


@dataclass(frozen=True)
class UserAccount:
    username: str
    password_hash: str
    authorities: tuple[str, ...]
    name: str = ""
    id: int | None = None


@dataclass(frozen=True)
class Principal:
    username: str
    roles: frozenset[str]
    name: str = ""

    def has_role(self, role: str) -> bool:
        return role in self.roles
