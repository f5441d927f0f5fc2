from __future__ import annotations

from app.domain.entities import Anime


def has_valid_name(anime: Anime) -> bool:
    """An anime name must be present and contain something other than whitespace."""
    name = anime.name
    return isinstance(name, str) and bool(name.strip())
