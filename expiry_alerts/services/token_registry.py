from __future__ import annotations

import logging
from typing import Any

from expiry_alerts.models import DeviceRegistration, TokenFound, TokenLookup, TokenMissing

logger = logging.getLogger("expiry_alerts.token_registry")

TOKEN_FIELD = "token"


def _normalize_token(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    return normalized or None


def resolve_registration_token(snapshot: Any) -> TokenLookup:
    """Document id first, then the ``token`` field."""
    token = _normalize_token(getattr(snapshot, "id", None))
    if token is not None:
        return TokenFound(token)

    data = snapshot.to_dict() or {}
    token = _normalize_token(data.get(TOKEN_FIELD))
    if token is not None:
        return TokenFound(token)
    return TokenMissing("no document id or token field")


def _snapshot_path(snapshot: Any) -> str | None:
    reference = getattr(snapshot, "reference", None)
    path = getattr(reference, "path", None)
    return str(path) if path else None


def fetch_device_registrations(db: Any, *, collection_group: str = "tokens") -> list[DeviceRegistration]:
    registrations: list[DeviceRegistration] = []
    skipped = 0
    for snapshot in db.collection_group(collection_group).stream():
        lookup = resolve_registration_token(snapshot)
        if isinstance(lookup, TokenMissing):
            skipped += 1
            logger.warning(
                "device_registration_skipped",
                extra={"path": _snapshot_path(snapshot), "reason": lookup.reason},
            )
            continue
        registrations.append(
            DeviceRegistration(
                token=lookup.token,
                reference=snapshot.reference,
                path=_snapshot_path(snapshot),
            )
        )

    logger.info(
        "device_registrations_loaded",
        extra={
            "collection_group": collection_group,
            "token_count": len(registrations),
            "skipped_count": skipped,
        },
    )
    return registrations
