from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional

from schemas.registration import ParticipantRecord, ParticipantStatus


def percentage(value: int, total: int) -> float:
    return round(value / total * 100, 1) if total > 0 else 0.0


def calculate_analytics(
    participants: List[ParticipantRecord],
    fee_amount: float = 0,
    today: Optional[date] = None,
    trend_days: int = 7,
) -> Dict:
    """
    Computes the host dashboard figures from the participant list.

    Used when the API has no analytics endpoint for the event.
    """
    if today is None:
        today = date.today()

    status_counts = {s.value: 0 for s in ParticipantStatus}
    daily = Counter()

    for p in participants:
        status = (p.status or ParticipantStatus.REGISTERED).value
        status_counts[status] += 1
        if p.registeredAt:
            daily[p.registeredAt.date().isoformat()] += 1

    trend = []
    for offset in range(trend_days - 1, -1, -1):
        day = today - timedelta(days=offset)
        trend.append({
            "date": day.strftime("%d %b"),
            "count": daily.get(day.isoformat(), 0),
        })

    total = len(participants)
    return {
        "totalRegistrations": total,
        "confirmedParticipants": status_counts[ParticipantStatus.CONFIRMED.value],
        "attendedParticipants": status_counts[ParticipantStatus.ATTENDED.value],
        "cancelledRegistrations": status_counts[ParticipantStatus.CANCELLED.value],
        "registrationTrend": trend,
        "statusDistribution": status_counts,
        "statusPercentages": {
            k: percentage(v, total) for k, v in status_counts.items()
        },
        "dailyRegistrations": dict(daily),
        "revenue": (fee_amount or 0) * total,
    }
