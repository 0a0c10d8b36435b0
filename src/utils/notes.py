from typing import List, Optional

from schemas.note import NoteUpload, SUBJECTS

PDF_CONTENT_TYPE = "application/pdf"
MAX_NOTE_BYTES = 50 * 1024 * 1024


def parse_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def validate_note_file(content_type: Optional[str], size: int,
                       max_bytes: int = MAX_NOTE_BYTES) -> Optional[str]:
    if content_type != PDF_CONTENT_TYPE:
        return "Only PDF files are allowed"
    if size > max_bytes:
        return f"File size must be less than {max_bytes // (1024 * 1024)}MB"
    return None


def validate_note_upload(note: NoteUpload, has_file: bool) -> Optional[str]:
    """
    Returns the first problem with an upload, or None.

    The upload form shows a single message at a time, so checks stop at the
    first failure.
    """
    if not note.title.strip():
        return "Title is required"
    if not note.subject:
        return "Subject is required"
    if note.subject not in SUBJECTS:
        return "Unknown subject"
    if not has_file:
        return "Please select a PDF file"
    return None
