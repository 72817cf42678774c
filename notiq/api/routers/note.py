"""
Endpoints for `note`. Every route requires a bearer token and only touches the
caller's notes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from notiq.api.deps import get_current_user
from notiq.api.schemas.note import MessageOut, NoteCreate, NoteOut, NoteUpdate
from notiq.services import attachment_service, note_service


router = APIRouter(prefix="/notes", tags=["Notes"], dependencies=[Depends(get_current_user)])


@router.get(
    "",
    response_model=List[NoteOut],
    summary="List notes",
    description="All notes of the authenticated user, newest first.",
)
def list_notes(user=Depends(get_current_user)) -> List[NoteOut]:
    return [NoteOut.from_doc(n) for n in note_service.list_notes(user)]


@router.post(
    "",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create note",
)
def create_note(payload: NoteCreate, user=Depends(get_current_user)) -> NoteOut:
    return NoteOut.from_doc(note_service.create_note(user, payload))


@router.put(
    "/{note_id}",
    response_model=NoteOut,
    summary="Update note",
    description="Partial update: fields left out of the body keep their value.",
)
@router.patch("/{note_id}", response_model=NoteOut, include_in_schema=False)
def update_note(note_id: str, payload: NoteUpdate, user=Depends(get_current_user)) -> NoteOut:
    return NoteOut.from_doc(note_service.update_note(user, note_id, payload))


@router.delete("/{note_id}", response_model=MessageOut, summary="Delete note")
def delete_note(note_id: str, user=Depends(get_current_user)) -> MessageOut:
    note_service.delete_note(user, note_id)
    return MessageOut(message="Note deleted")


@router.post(
    "/{note_id}/upload",
    response_model=NoteOut,
    summary="Attach file",
    description="Uploads an image or PDF to object storage and appends it to the note.",
)
async def upload_attachment(
    note_id: str,
    file: Optional[UploadFile] = File(default=None),
    user=Depends(get_current_user),
) -> NoteOut:
    note = await attachment_service.upload_attachment(user, note_id, file)
    return NoteOut.from_doc(note)
