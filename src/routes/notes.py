import asyncio
import json
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from api.gateway import gateway
from core.config import settings
from core.security import current_user
from schemas.note import NoteFilters, NoteType, NoteUpload
from schemas.user import CurrentUser
from utils.notes import parse_tags, validate_note_file, validate_note_upload


log = structlog.get_logger()
router = APIRouter(prefix="/api/notes")


@router.get("")
async def list_notes(
    subject: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(6, ge=1, le=100),
    user: CurrentUser = Depends(current_user),
):
    filters = NoteFilters(
        subject=None if subject == "all" else subject,
        search=search or None,
        limit=limit,
    )
    notes = await asyncio.to_thread(
        gateway.list_notes, filters.model_dump(exclude_none=True), user.token
    )
    return {"notes": notes}


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_note(
    file: Optional[UploadFile] = File(None),
    title: str = Form(""),
    description: str = Form(""),
    subject: str = Form(""),
    type: NoteType = Form(NoteType.NOTES),
    semester: Optional[str] = Form(None),
    university: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    pages: Optional[int] = Form(None),
    user: CurrentUser = Depends(current_user),
):
    note = NoteUpload(
        title=title.strip(),
        description=description.strip(),
        subject=subject,
        type=type,
        semester=semester or None,
        university=university or None,
        tags=parse_tags(tags),
        pages=pages,
    )
    error = validate_note_upload(note, has_file=file is not None and bool(file.filename))
    if error:
        raise HTTPException(400, error)

    if file.size is not None:
        error = validate_note_file(file.content_type, file.size, settings.NOTE_MAX_BYTES)
        if error:
            raise HTTPException(400, error)

    content = await file.read()
    error = validate_note_file(file.content_type, len(content), settings.NOTE_MAX_BYTES)
    if error:
        raise HTTPException(400, error)

    fields = note.model_dump(exclude_none=True, mode="json")
    fields.pop("tags")
    if note.tags:
        fields["tags"] = json.dumps(note.tags)
    result = await asyncio.to_thread(
        gateway.upload_note, fields, file.filename, content, file.content_type, user.token
    )
    log.info("note.uploaded", title=note.title, subject=note.subject, size=len(content),
             user=user.id)
    return {"message": "Notes uploaded successfully", "note": result}


@router.get("/{note_id}/download")
async def download_note(note_id: str, user: CurrentUser = Depends(current_user)):
    data = await asyncio.to_thread(gateway.download_note, note_id, user.token)
    if not data.get("fileUrl"):
        raise HTTPException(404, "File not found")
    return {"fileUrl": data["fileUrl"]}
