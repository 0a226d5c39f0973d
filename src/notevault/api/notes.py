"""Notes API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.notifier import ChangeNotifier, get_change_notifier
from ..core.schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    RevertRequest,
    UnlockRequest,
    VersionEntry,
)
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> NoteService:
    return NoteService(session, notifier)


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a new note."""
    return await note_service.create_note(current_user_id, request)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    page: int = Query(1, ge=1),
    per_page: int = Query(get_settings().default_page_size, ge=1, le=get_settings().max_page_size),
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """List note metadata, most recently updated first."""
    return await note_service.list_notes(page=page, per_page=per_page)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: int,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Get a specific note; protected content stays hidden from non-owners."""
    return await note_service.get_note(note_id, current_user_id)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: int,
    request: NoteUpdate,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Update a note; the previous state is kept as a version."""
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: int,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Delete a note and its history."""
    await note_service.delete_note(note_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/unlock", response_model=NoteResponse)
async def unlock_note(
    note_id: int,
    request: UnlockRequest,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Read a protected note's content with its password."""
    return await note_service.unlock_note(note_id, current_user_id, request.password)


@router.get("/{note_id}/versions", response_model=List[VersionEntry])
async def list_versions(
    note_id: int,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Current state followed by previous versions, newest first."""
    return await note_service.list_versions(note_id, current_user_id)


@router.post("/{note_id}/revert", response_model=NoteResponse)
async def revert_note(
    note_id: int,
    request: RevertRequest,
    current_user_id: int = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Restore the title and description of a previous version."""
    return await note_service.revert_note(note_id, current_user_id, request.version_id)
