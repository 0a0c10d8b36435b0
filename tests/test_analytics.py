from datetime import date, datetime, timezone

from schemas.registration import ParticipantRecord
from utils.analytics import calculate_analytics, percentage


def record(status, day):
    return ParticipantRecord.model_validate({
        "status": status,
        "registeredAt": datetime(2026, 3, day, 8, 0, tzinfo=timezone.utc),
    })


def test_counts_by_status_and_revenue():
    participants = [
        record("registered", 1),
        record("confirmed", 2),
        record("confirmed", 2),
        record("attended", 5),
        record("cancelled", 7),
    ]
    result = calculate_analytics(participants, fee_amount=250, today=date(2026, 3, 7))
    assert result["totalRegistrations"] == 5
    assert result["confirmedParticipants"] == 2
    assert result["attendedParticipants"] == 1
    assert result["cancelledRegistrations"] == 1
    assert result["statusDistribution"]["registered"] == 1
    assert result["statusPercentages"]["confirmed"] == 40.0
    assert result["revenue"] == 1250


def test_trend_covers_last_seven_days():
    participants = [record("registered", 1), record("registered", 7), record("registered", 7)]
    result = calculate_analytics(participants, today=date(2026, 3, 7))
    trend = result["registrationTrend"]
    assert len(trend) == 7
    assert trend[0] == {"date": "01 Mar", "count": 1}
    assert trend[-1] == {"date": "07 Mar", "count": 2}


def test_missing_status_counts_as_registered():
    result = calculate_analytics([ParticipantRecord()], today=date(2026, 3, 7))
    assert result["statusDistribution"]["registered"] == 1
    assert result["dailyRegistrations"] == {}


def test_percentage_of_empty_total():
    assert percentage(3, 0) == 0.0
    assert percentage(1, 3) == 33.3
