"""Entry API routes.

Endpoints:
- GET    /api/entries: List all entries ordered by word
- POST   /api/entries: Create an entry (passphrase required when configured)
- PUT    /api/entries?id=<id>: Update an entry
- DELETE /api/entries?id=<id>: Delete an entry
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from api.dependencies import get_entry_repo
from api.models import (
    DeleteResponse,
    EntryEnvelope,
    EntryListResponse,
    EntryRequest,
    EntryResponse,
)
from api.security import require_passphrase
from domain.model.entry import EntryDraft
from domain.model.errors import DuplicateError
from port.entry_repository import EntryRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["entries"])


def _to_draft(request: Optional[EntryRequest]) -> EntryDraft:
    """Trim the request fields and reject blanks with 400."""
    body = request or EntryRequest()
    draft = EntryDraft(
        word=body.word or "",
        definition=body.definition or "",
        illustration=body.illustration or "",
        recording=body.recording,
    ).normalized()
    if not draft.word or not draft.definition or not draft.illustration:
        raise HTTPException(status_code=400, detail="Missing required fields")
    return draft


def _require_id(entry_id: Optional[str]) -> str:
    if not entry_id:
        raise HTTPException(status_code=400, detail="Missing id")
    return entry_id


@router.get("", response_model=EntryListResponse)
async def list_entries(repo: EntryRepository = Depends(get_entry_repo)):
    """List all entries ordered by word."""
    entries = repo.list_all()
    return EntryListResponse(entries=[EntryResponse.from_domain(e) for e in entries])


@router.post(
    "",
    response_model=EntryEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_passphrase)],
)
async def create_entry(
    request: Optional[EntryRequest] = Body(None),
    repo: EntryRepository = Depends(get_entry_repo),
):
    """Create an entry. Returns 409 if the word (case-insensitive) already exists."""
    draft = _to_draft(request)
    try:
        entry = repo.create(draft)
    except DuplicateError:
        raise HTTPException(status_code=409, detail="Word already exists")

    logger.info("Entry created", extra={"entry_id": entry.id, "word": entry.word})
    return EntryEnvelope(entry=EntryResponse.from_domain(entry))


@router.put("", response_model=EntryEnvelope, dependencies=[Depends(require_passphrase)])
async def update_entry(
    entry_id: Optional[str] = Query(None, alias="id"),
    request: Optional[EntryRequest] = Body(None),
    repo: EntryRepository = Depends(get_entry_repo),
):
    """Update an entry. Last write wins; 409 if the word belongs to another entry."""
    entry_id = _require_id(entry_id)
    draft = _to_draft(request)
    try:
        entry = repo.update(entry_id, draft)
    except DuplicateError:
        raise HTTPException(status_code=409, detail="Word already exists")
    if entry is None:
        raise HTTPException(status_code=404, detail="Not found")

    logger.info("Entry updated", extra={"entry_id": entry.id, "word": entry.word})
    return EntryEnvelope(entry=EntryResponse.from_domain(entry))


@router.delete("", response_model=DeleteResponse, dependencies=[Depends(require_passphrase)])
async def delete_entry(
    entry_id: Optional[str] = Query(None, alias="id"),
    repo: EntryRepository = Depends(get_entry_repo),
):
    """Delete an entry."""
    entry_id = _require_id(entry_id)
    if not repo.delete(entry_id):
        raise HTTPException(status_code=404, detail="Not found")

    logger.info("Entry deleted", extra={"entry_id": entry_id})
    return DeleteResponse(ok=True)
