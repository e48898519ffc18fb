# -*- test-case-name: focusflow.model.test.test_dates -*-
"""
Every date in the ledger is a local civil date, derived from an epoch
timestamp in the local time zone at the moment of the event, and stored as
an ISO C{YYYY-MM-DD} string.  Nothing else in the model converts times to
dates.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo

from datetype import DateTime, aware
from dateutil.tz import tzlocal


def localDateTime(
    timestamp: float, zone: tzinfo | None = None
) -> DateTime[tzinfo]:
    """
    Convert an epoch timestamp to an aware datetime in C{zone}, or the local
    time zone if none is given.
    """
    return aware(
        datetime.fromtimestamp(timestamp, zone if zone is not None else tzlocal()),
        tzinfo,
    )


def dateKey(timestamp: float, zone: tzinfo | None = None) -> str:
    """
    The ledger key for the calendar day containing C{timestamp}.
    """
    return localDateTime(timestamp, zone).date().isoformat()


def daysBefore(key: str, days: int) -> str:
    """
    The ledger key C{days} calendar days before C{key}.
    """
    return (date.fromisoformat(key) - timedelta(days=days)).isoformat()
