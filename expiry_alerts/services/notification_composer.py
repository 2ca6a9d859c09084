from __future__ import annotations

from expiry_alerts.models import BucketCounts, NotificationPayload

DEFAULT_TITLE = "Expiry Summary"
BODY_TEMPLATE = "≤1d={c1} • 2–3d={c3} • 4–7d={c7} (total {total})"


def compose_expiry_summary(
    counts: BucketCounts,
    *,
    title: str = DEFAULT_TITLE,
    link: str | None = None,
) -> NotificationPayload:
    if min(counts.within_1_day, counts.within_3_days, counts.within_7_days) < 0:
        raise ValueError("Bucket counts cannot be negative.")
    if counts.total == 0:
        raise ValueError("Nothing to summarize: all bucket counts are zero.")

    body = BODY_TEMPLATE.format(
        c1=counts.within_1_day,
        c3=counts.within_3_days,
        c7=counts.within_7_days,
        total=counts.total,
    )
    normalized_link = (link or "").strip() or None
    return NotificationPayload(title=(title or "").strip() or DEFAULT_TITLE, body=body, link=normalized_link)
