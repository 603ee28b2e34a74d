from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PostCreate(BaseModel):
    """Fields accepted by ``POST /api/posts``.

    ``title`` and ``content`` are optional here so that a missing value can be
    reported with the API's own 400 message instead of a schema error.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None
    location: Optional[str] = None
    tags: List[str] = []

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [item for item in value if item != ""]
        return value

    def missing_required(self) -> bool:
        return not self.title or not self.content


class PostUpdate(PostCreate):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    title: str
    content: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    location: Optional[str] = None
    tags: List[str] = []
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("tags", mode="before")
    @classmethod
    def copy_tags(cls, value):
        return list(value or [])


class MessageResponse(BaseModel):
    message: str
