from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.entities import Anime

BLANK_NAME_MESSAGE = "The name of this anime cannot be empty"


class AnimeIn(BaseModel):
    name: str = Field(max_length=255)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError(BLANK_NAME_MESSAGE)
        return v

    def to_entity(self) -> Anime:
        return Anime(name=self.name)


class AnimeBatchItemIn(BaseModel):
    # Blank names pass; AnimeService.save_all rejects them after persisting.
    name: str = Field(max_length=255)

    def to_entity(self) -> Anime:
        return Anime(name=self.name)


class AnimeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str

    @classmethod
    def from_entity(cls, anime: Anime) -> "AnimeOut":
        return cls.model_validate(anime)


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    path: str
    status: int
    error: str
    exception: str
    message: str
    developer_message: str = Field(alias="developerMessage")
    request_id: str = Field(alias="requestId")
