from __future__ import annotations

import logging
from datetime import datetime

from expiry_alerts.firebase import FirebaseContext
from expiry_alerts.models import JobReport, JobStatus
from expiry_alerts.services.expiry_buckets import alert_cutoff, count_buckets, today_in_zone
from expiry_alerts.services.inventory import fetch_expiring_products
from expiry_alerts.services.notification_composer import compose_expiry_summary
from expiry_alerts.services.push_dispatch import dispatch_notification
from expiry_alerts.services.token_registry import fetch_device_registrations
from expiry_alerts.settings import Settings, resolve_alert_timezone

logger = logging.getLogger("expiry_alerts.job")


def run_expiry_alert_job(
    context: FirebaseContext,
    *,
    settings: Settings,
    now: datetime | None = None,
) -> JobReport:
    """One pass: query, bucket, and when there is something to say, notify.

    Errors from the inventory query, the registry read or a push batch are
    not handled here; they end the run.
    """
    tz = resolve_alert_timezone(settings.alert_timezone)
    today = today_in_zone(tz, now)
    cutoff = alert_cutoff(today)
    logger.info(
        "expiry_scan_started",
        extra={"reference_day": today.isoformat(), "cutoff": cutoff, "timezone": str(tz)},
    )

    products = fetch_expiring_products(
        context.db,
        cutoff=cutoff,
        collection=settings.products_collection,
        active_status=settings.active_status,
    )
    buckets = count_buckets(today, products)
    logger.info("expiry_buckets_computed", extra={"buckets": buckets.to_dict()})

    if buckets.total == 0:
        logger.info("no_expiring_products", extra={"product_count": len(products)})
        return JobReport(status=JobStatus.NO_PRODUCTS, reference_day=today, buckets=buckets)

    registrations = fetch_device_registrations(
        context.db,
        collection_group=settings.token_collection_group,
    )
    if not registrations:
        logger.info("no_device_registrations")
        return JobReport(status=JobStatus.NO_TOKENS, reference_day=today, buckets=buckets)

    payload = compose_expiry_summary(
        buckets,
        title=settings.notification_title,
        link=settings.notification_link,
    )
    result = dispatch_notification(
        context.app,
        registrations,
        payload,
        batch_size=settings.push_batch_size,
    )
    logger.info(
        "expiry_alerts_sent",
        extra={"body": payload.body, "token_count": len(registrations), **result.to_dict()},
    )
    return JobReport(
        status=JobStatus.SENT,
        reference_day=today,
        buckets=buckets,
        token_count=len(registrations),
        dispatch=result,
    )
