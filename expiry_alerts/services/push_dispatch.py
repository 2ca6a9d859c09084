from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from firebase_admin import messaging

from expiry_alerts.models import (
    DeletableReference,
    DeviceRegistration,
    DispatchOutcome,
    DispatchResult,
    NotificationPayload,
)
from expiry_alerts.settings import FCM_MULTICAST_LIMIT

logger = logging.getLogger("expiry_alerts.push_dispatch")

# Matched against "-" normalized, lower-cased error code, message and class name.
STALE_TOKEN_ERROR_MARKERS = (
    "unregistered",
    "not-registered",
    "invalid-argument",
    "invalid-registration-token",
)


def chunk_registrations(
    registrations: Sequence[DeviceRegistration],
    size: int = FCM_MULTICAST_LIMIT,
) -> list[list[DeviceRegistration]]:
    if size < 1:
        raise ValueError("Batch size must be positive.")
    size = min(size, FCM_MULTICAST_LIMIT)
    return [list(registrations[start : start + size]) for start in range(0, len(registrations), size)]


def _build_multicast_message(tokens: list[str], payload: NotificationPayload) -> messaging.MulticastMessage:
    webpush = None
    if payload.link:
        webpush = messaging.WebpushConfig(fcm_options=messaging.WebpushFCMOptions(link=payload.link))
    return messaging.MulticastMessage(
        tokens=tokens,
        notification=messaging.Notification(title=payload.title, body=payload.body),
        webpush=webpush,
    )


def _send_batch(app: Any, tokens: list[str], payload: NotificationPayload) -> messaging.BatchResponse:
    return messaging.send_each_for_multicast(_build_multicast_message(tokens, payload), app=app)


def _outcome_from_response(token: str, response: Any) -> DispatchOutcome:
    if response.success:
        return DispatchOutcome(token=token, success=True)

    exc = response.exception
    if exc is None:
        return DispatchOutcome(token=token, success=False, error_code="unknown", error_message=None)
    error_code = getattr(exc, "code", None)
    return DispatchOutcome(
        token=token,
        success=False,
        error_code=str(error_code) if error_code else exc.__class__.__name__,
        error_message=f"{exc.__class__.__name__}: {exc}",
    )


def is_stale_token_error(outcome: DispatchOutcome) -> bool:
    if outcome.success:
        return False
    haystack = " ".join(part for part in (outcome.error_code, outcome.error_message) if part)
    normalized = haystack.lower().replace("_", "-").replace(" ", "-")
    return any(marker in normalized for marker in STALE_TOKEN_ERROR_MARKERS)


def _token_preview(token: str) -> str:
    return f"{token[:12]}..." if len(token) > 12 else token


def _delete_stale_registrations(references: list[DeletableReference]) -> tuple[int, int]:
    deleted = 0
    failed = 0
    for reference in references:
        path = getattr(reference, "path", None)
        try:
            reference.delete()
        except Exception as exc:
            failed += 1
            logger.warning(
                "stale_registration_delete_failed",
                extra={"path": path, "error": f"{exc.__class__.__name__}: {exc}"},
            )
            continue
        deleted += 1
        logger.info("stale_registration_deleted", extra={"path": path})
    return deleted, failed


def dispatch_notification(
    app: Any,
    registrations: Sequence[DeviceRegistration],
    payload: NotificationPayload,
    *,
    batch_size: int = FCM_MULTICAST_LIMIT,
) -> DispatchResult:
    if not registrations:
        logger.info("no_device_registrations")
        return DispatchResult()

    batches = chunk_registrations(registrations, batch_size)
    success = 0
    failure = 0
    stale_references: list[DeletableReference] = []

    # A batch that raises aborts the remaining batches and skips cleanup.
    for batch_index, batch in enumerate(batches, start=1):
        response = _send_batch(app, [item.token for item in batch], payload)
        batch_failures = 0
        for registration, send_response in zip(batch, response.responses, strict=True):
            outcome = _outcome_from_response(registration.token, send_response)
            if outcome.success:
                success += 1
                continue

            failure += 1
            batch_failures += 1
            stale = is_stale_token_error(outcome)
            if stale:
                stale_references.append(registration.reference)
            logger.warning(
                "push_token_failed",
                extra={
                    "batch": batch_index,
                    "token": _token_preview(outcome.token),
                    "error_code": outcome.error_code,
                    "error": outcome.error_message,
                    "stale": stale,
                },
            )

        logger.info(
            "push_batch_sent",
            extra={
                "batch": batch_index,
                "batch_count": len(batches),
                "target_count": len(batch),
                "failure_count": batch_failures,
            },
        )

    deleted, deletion_failed = _delete_stale_registrations(stale_references)
    return DispatchResult(
        success_count=success,
        failure_count=failure,
        batch_count=len(batches),
        stale_count=len(stale_references),
        deleted_count=deleted,
        deletion_failed_count=deletion_failed,
    )
