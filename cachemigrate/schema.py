"""Pydantic model of the current cache shape."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cachemigrate.core.version import Version


class CacheSnapshot(BaseModel):
    """The application cache as documented since 0.0.28.

    Unknown fields are kept so a newer shape still validates.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str
    theme: str
    tags: list[Any] = Field(default_factory=list)
    authors: list[Any] = Field(default_factory=list)
    post_previews: list[Any] = Field(default_factory=list, alias="postPreviews")
    user: UUID | None = None

    @field_validator("version")
    @classmethod
    def check_version(cls, value: str) -> str:
        parsed = Version.parse(value)
        if parsed.is_err():
            raise ValueError(parsed.reason)
        return value

    def to_blob(self) -> dict:
        """Dump back to the JSON-ready field names the store uses."""
        return self.model_dump(mode="json", by_alias=True)
