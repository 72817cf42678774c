"""
Note attachments: classify by declared media type, stream to object storage and
append the resulting descriptor to the note.
"""
import asyncio
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import UploadFile

from notiq.core.config import settings
from notiq.core.exceptions import NotFound, ValidationFailed
from notiq.infrastructure.storage import object_store
from notiq.repositories import note_repo
from notiq.services.note_service import get_owned_note

_log = logging.getLogger("notiq.attachments")

PDF_TYPE = "application/pdf"


def classify(content_type: str | None) -> str:
    """Attachment kind for a media type: `pdf`, `image`, or ValidationFailed."""
    ct = (content_type or "").split(";")[0].strip().lower()
    if ct == PDF_TYPE:
        return "pdf"
    if ct.startswith("image/"):
        return "image"
    raise ValidationFailed("Only images and PDF files are allowed")


def _size_of(fileobj) -> int:
    fileobj.seek(0, os.SEEK_END)
    size = fileobj.tell()
    fileobj.seek(0)
    return size


def _object_key(filename: str | None, kind: str) -> str:
    ext = ""
    if filename and "." in filename:
        ext = filename[filename.rfind("."):].lower()
    elif kind == "pdf":
        ext = ".pdf"
    return f"{settings.storage_prefix}{uuid.uuid4().hex}{ext}"


async def upload_attachment(user: Dict[str, Any], note_id: str, upload: UploadFile | None) -> Dict[str, Any]:
    note = get_owned_note(note_id, user)
    if upload is None or not upload.filename:
        raise ValidationFailed("No file uploaded")

    kind = classify(upload.content_type)
    fileobj = upload.file
    size = _size_of(fileobj)
    if size == 0:
        raise ValidationFailed("Uploaded file is empty")
    if size > settings.max_upload_bytes:
        raise ValidationFailed(f"File exceeds {settings.max_upload_mb} MB")

    key = _object_key(upload.filename, kind)
    content_type = PDF_TYPE if kind == "pdf" else upload.content_type

    def _put() -> str:
        return object_store.upload_fileobj(fileobj, key=key, content_type=content_type)

    # boto3 blocks; keep the event loop free while the stream completes
    loop = asyncio.get_running_loop()
    url = await loop.run_in_executor(None, _put)

    attachment = {
        "url": url,
        "storage_id": key,
        "type": kind,
        "filename": upload.filename,
        "content_type": content_type,
        "size": size,
        "uploaded_at": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
    updated = note_repo.push_attachment(note["_id"], attachment)
    if updated is None:
        raise NotFound("Note not found")
    _log.info("Attachment stored note_id=%s key=%s type=%s bytes=%s", note["_id"], key, kind, size)
    return updated
