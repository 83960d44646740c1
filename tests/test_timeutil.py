from datetime import datetime, timedelta, timezone

from invoicesrv.timeutil import to_jst


def test_utc_converted_to_jst():
    moment = datetime(2025, 5, 31, 13, 0, tzinfo=timezone.utc)
    converted = to_jst(moment)
    assert converted.isoformat() == "2025-05-31T22:00:00+09:00"
    assert converted == moment


def test_offset_and_name():
    converted = to_jst(datetime(2021, 1, 1, tzinfo=timezone.utc))
    assert converted.utcoffset() == timedelta(hours=9)
    assert converted.tzname() == "Asia/Tokyo"


def test_naive_is_treated_as_utc():
    naive = datetime(2025, 5, 31, 13, 0)
    assert to_jst(naive) == naive.replace(tzinfo=timezone.utc)


def test_other_zone_keeps_instant():
    eastern = timezone(timedelta(hours=-5))
    moment = datetime(2021, 1, 1, 8, 0, tzinfo=eastern)
    converted = to_jst(moment)
    assert converted == moment
    assert converted.utcoffset() == timedelta(hours=9)