"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from domain.model.entry import Entry


class EntryRequest(BaseModel):
    """Request body for creating or updating an entry.

    Fields are optional here; blank or missing values are rejected by the
    route with a 400 so the error body keeps the ``{error}`` shape.
    """
    word: Optional[str] = None
    definition: Optional[str] = None
    illustration: Optional[str] = None
    recording: Optional[str] = Field(None, description="Recorded audio as a base64 data URL")


class EntryResponse(BaseModel):
    """A dictionary entry as returned by the API (camelCase timestamps)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Entry ID")
    word: str
    definition: str
    illustration: str
    recording: Optional[str] = None
    created_at: int = Field(..., alias="createdAt", description="Creation time, ms since epoch")
    updated_at: int = Field(..., alias="updatedAt", description="Last update time, ms since epoch")

    @classmethod
    def from_domain(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            word=entry.word,
            definition=entry.definition,
            illustration=entry.illustration,
            recording=entry.recording,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class EntryEnvelope(BaseModel):
    entry: EntryResponse


class EntryListResponse(BaseModel):
    entries: list[EntryResponse]


class DeleteResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
