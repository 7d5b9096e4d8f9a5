from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

TITLE_MAX = 200
CONTENT_MAX = 50_000


class NoteCreate(BaseModel):
    # strip runs before the length constraints, so "   " is too short
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX)
    content: str = Field(min_length=1, max_length=CONTENT_MAX)

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("title", "missing"): "Title is required",
        ("title", "string_too_short"): "Title is required",
        ("title", "string_too_long"): "Title must be less than 200 characters",
        ("content", "missing"): "Content is required",
        ("content", "string_too_short"): "Content is required",
        ("content", "string_too_long"): "Content must be less than 50,000 characters",
    }


class NoteUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX)
    content: Optional[str] = Field(default=None, min_length=1, max_length=CONTENT_MAX)

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("title", "string_too_short"): "Title cannot be empty",
        ("title", "string_too_long"): "Title must be less than 200 characters",
        ("content", "string_too_short"): "Content cannot be empty",
        ("content", "string_too_long"): "Content must be less than 50,000 characters",
    }

    @field_validator("title", "content", mode="before")
    @classmethod
    def _reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        # only runs for keys that were sent; omitted keys keep the default
        if v is None:
            raise PydanticCustomError("null_not_allowed", "{field} cannot be null", {"field": info.field_name})
        return v

    def changes(self) -> dict[str, str]:
        """Fields the client actually sent, ready for the store."""
        return self.model_dump(include=self.model_fields_set)


class NoteOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    content: str
    created_at: str
    updated_at: str


class DeleteResult(BaseModel):
    success: bool = True
