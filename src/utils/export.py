import csv
import io
from typing import Iterable, Iterator, List

from schemas.registration import ParticipantRecord, ParticipantStatus

HEADER = [
    "Participant Name", "Participant Email", "Phone", "Institution",
    "Team Name", "Team Size", "Status", "Registered At",
    "Team Member Name", "Team Member Email", "Team Member Phone",
    "Team Member Role", "Team Member Institution",
]

EXPORT_PURPOSES = ("participants", "analytics-export", "participants-with-teams")

MISSING = "N/A"


def _base_fields(p: ParticipantRecord, date_format: str) -> list:
    user = p.user
    return [
        (user.name if user else None) or MISSING,
        (user.email if user else None) or MISSING,
        p.phone or MISSING,
        p.institution or MISSING,
        p.teamName or "Individual",
        p.teamSize or 1,
        (p.status or ParticipantStatus.REGISTERED).value,
        p.registeredAt.strftime(date_format) if p.registeredAt else MISSING,
    ]


def participant_rows(
    participants: Iterable[ParticipantRecord],
    date_format: str = "%d/%m/%Y",
) -> Iterator[list]:
    """
    Flattens participants into export rows, header first.

    A participant with team members yields one row per member, repeating its
    own fields; an individual yields one row with empty member columns.
    """
    yield HEADER
    for p in participants:
        base = _base_fields(p, date_format)
        if p.teamMembers:
            for member in p.teamMembers:
                yield base + [
                    member.name or MISSING,
                    member.email or MISSING,
                    member.phone or MISSING,
                    member.role or MISSING,
                    member.institution or MISSING,
                ]
        else:
            yield base + ["", "", "", "", ""]


def iter_csv(rows: Iterable[list]) -> Iterator[str]:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in rows:
        writer.writerow(row)
        yield buf.getvalue()
        buf.seek(0); buf.truncate(0)


def export_participants_csv(
    participants: Iterable[ParticipantRecord],
    date_format: str = "%d/%m/%Y",
) -> str:
    return "".join(iter_csv(participant_rows(participants, date_format)))


def export_filename(title: str, purpose: str) -> str:
    if purpose not in EXPORT_PURPOSES:
        raise ValueError(f"Unknown export purpose: {purpose}")
    return f"{title}-{purpose}.csv"


def count_rows(participants: List[ParticipantRecord]) -> int:
    """Data rows an export of ``participants`` contains (header excluded)."""
    return sum(max(1, len(p.teamMembers)) for p in participants)
