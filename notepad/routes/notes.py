"""
Note Pad API: Notes Route Handlers
====================================

What:  HTTP verb → NoteService mapping for the notes resource.
How:   Parse body/path, delegate to NoteService, pick the status code.
       Errors are raised by the service and rendered by the global handlers
       registered in main.py; no route catches anything.

Endpoints (under settings.api_prefix):
    POST   /notes            → 201 Note
    GET    /notes            → 200 [Note]
    GET    /notes/{id}       → 200 Note
    PUT    /notes/{id}       → 200 Note
    PATCH  /notes/{id}       → 200 Note
    DELETE /notes/{id}       → 204
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notepad.database import get_db_session
from notepad.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notepad.services.note_service import note_service

router = APIRouter(tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Storage failure", "model": ErrorResponse}}


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={**_BAD_REQUEST, **_SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Create a note; the server assigns id, created_at and updated_at."""
    return await note_service.create_note(db=db, payload=payload)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={**_SERVER_ERROR},
    summary="List all notes",
    description="Returns every note, newest first (created_at descending).",
)
async def list_notes(
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db=db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_BAD_REQUEST, **_SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Args:
        note_id: UUID path parameter. Malformed ids are rejected with 400
                 by the request-validation handler.
    """
    return await note_service.get_note(db=db, note_id=note_id)


# PUT and PATCH share one handler: both accept a partial body
@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_BAD_REQUEST, **_SERVER_ERROR},
    summary="Update a note",
)
@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_BAD_REQUEST, **_SERVER_ERROR},
    summary="Partially update a note",
)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Only fields present in the body change; updated_at always advances."""
    return await note_service.update_note(db=db, note_id=note_id, payload=payload)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, note_id=note_id)
    return Response(status_code=204)
