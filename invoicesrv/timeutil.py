"""Time zone helpers."""

from datetime import datetime, timedelta, timezone

JST = timezone(timedelta(hours=9), "Asia/Tokyo")


def to_jst(moment: datetime) -> datetime:
    """Return the same instant in Japan Standard Time; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(JST)