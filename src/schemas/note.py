from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

SUBJECTS = [
    "Computer Science",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Electronics",
    "Mechanical Engineering",
    "Civil Engineering",
    "Electrical Engineering",
    "Other",
]

SEMESTERS = [f"Sem {n}" for n in range(1, 9)]


class NoteType(str, Enum):
    NOTES = "Notes"
    PYQ = "PYQ"
    CHEATSHEET = "Cheatsheet"
    LAB_MANUAL = "Lab Manual"
    SLIDES = "Slides"


class NoteUpload(BaseModel):
    title: str = ""
    description: str = ""
    subject: str = ""
    type: NoteType = NoteType.NOTES
    semester: Optional[str] = None
    university: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    pages: Optional[int] = Field(None, ge=1)


class NoteFilters(BaseModel):
    subject: Optional[str] = None
    search: Optional[str] = None
    sort: str = "latest"
    limit: int = Field(6, ge=1, le=100)
