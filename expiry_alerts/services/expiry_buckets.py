from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from expiry_alerts.models import BucketCounts, ExpiryBucket, Product

ALERT_HORIZON_DAYS = 7
CANONICAL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_in_zone(tz: tzinfo, now: datetime | None = None) -> date:
    reference = now if now is not None else datetime.now(tz)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=tz)
    return reference.astimezone(tz).date()


def alert_cutoff(today: date, horizon_days: int = ALERT_HORIZON_DAYS) -> str:
    return (today + timedelta(days=horizon_days)).isoformat()


def parse_expiry_date(raw: object) -> date | None:
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not CANONICAL_DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def day_offset(today: date, expiry_date: object) -> int | None:
    """Whole calendar days from ``today`` until ``expiry_date``.

    ``None`` stands for "infinitely far": missing and unparseable dates never
    land in a bucket.
    """
    parsed = parse_expiry_date(expiry_date)
    if parsed is None:
        return None
    return (parsed - today).days


def classify_offset(offset: int | None) -> ExpiryBucket | None:
    if offset is None:
        return None
    if offset <= 1:
        return ExpiryBucket.WITHIN_1_DAY
    if offset <= 3:
        return ExpiryBucket.WITHIN_3_DAYS
    if offset <= ALERT_HORIZON_DAYS:
        return ExpiryBucket.WITHIN_7_DAYS
    return None


def count_buckets(today: date, products: Iterable[Product]) -> BucketCounts:
    counts = {bucket: 0 for bucket in ExpiryBucket}
    for product in products:
        bucket = classify_offset(day_offset(today, product.expiry_date))
        if bucket is not None:
            counts[bucket] += 1
    return BucketCounts(
        within_1_day=counts[ExpiryBucket.WITHIN_1_DAY],
        within_3_days=counts[ExpiryBucket.WITHIN_3_DAYS],
        within_7_days=counts[ExpiryBucket.WITHIN_7_DAYS],
    )
