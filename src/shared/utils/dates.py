"""Calendar days in the store's timezone."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from shared.settings import load_settings


def store_date(moment: datetime, timezone: str | None = None) -> str:
    """The store-local day (YYYY-MM-DD) that ``moment`` falls on.

    Naive datetimes are read as UTC. ``timezone`` defaults to the configured
    store timezone.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    zone = ZoneInfo(timezone or load_settings().timezone)
    return moment.astimezone(zone).date().isoformat()


def store_today(timezone: str | None = None) -> str:
    return store_date(datetime.now(UTC), timezone)
