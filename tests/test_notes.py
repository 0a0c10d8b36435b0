from schemas.note import NoteUpload
from utils.notes import MAX_NOTE_BYTES, parse_tags, validate_note_file, validate_note_upload


def test_parse_tags():
    assert parse_tags(" dsa, graphs ,, dp ") == ["dsa", "graphs", "dp"]
    assert parse_tags("") == []
    assert parse_tags(None) == []


def test_upload_checks_stop_at_first_problem():
    assert validate_note_upload(NoteUpload(), has_file=False) == "Title is required"
    note = NoteUpload(title="Graph theory")
    assert validate_note_upload(note, has_file=False) == "Subject is required"
    note = NoteUpload(title="Graph theory", subject="Mathematics")
    assert validate_note_upload(note, has_file=False) == "Please select a PDF file"
    assert validate_note_upload(note, has_file=True) is None


def test_unknown_subject():
    note = NoteUpload(title="Poems", subject="Poetry")
    assert validate_note_upload(note, has_file=True) == "Unknown subject"


def test_file_checks():
    assert validate_note_file("image/png", 10) == "Only PDF files are allowed"
    assert validate_note_file("application/pdf", MAX_NOTE_BYTES + 1) == \
        "File size must be less than 50MB"
    assert validate_note_file("application/pdf", 1024) is None
