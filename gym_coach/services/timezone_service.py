from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gym_coach.config import settings


def get_gym_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.GYM_TIMEZONE)
    except ZoneInfoNotFoundError:
        return ZoneInfo("UTC")


def now_in_gym_tz() -> datetime:
    return datetime.now(get_gym_timezone())


def gym_date(moment: datetime) -> date:
    """Calendar day of ``moment`` as seen from the gym; naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(get_gym_timezone()).date()


def to_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
