from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import ValidationError

from expiry_alerts.errors import CredentialError
from expiry_alerts.schemas import ServiceAccountKey
from expiry_alerts.settings import Settings

logger = logging.getLogger("expiry_alerts.firebase")


@dataclass(frozen=True, slots=True)
class FirebaseContext:
    """Process-wide Firebase handles, built once at startup and passed explicitly."""

    app: firebase_admin.App
    db: Any
    project_id: str


def parse_service_account(raw: str | None) -> dict[str, Any]:
    if raw is None or not raw.strip():
        raise CredentialError(
            code="FIREBASE_KEY_MISSING",
            message="FIREBASE_KEY secret is missing.",
        )
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CredentialError(
            code="FIREBASE_KEY_INVALID",
            message=f"FIREBASE_KEY is not valid JSON (line {exc.lineno}, column {exc.colno}).",
        ) from exc
    if not isinstance(decoded, dict):
        raise CredentialError(
            code="FIREBASE_KEY_INVALID",
            message="FIREBASE_KEY must be a JSON object.",
        )

    try:
        key = ServiceAccountKey.model_validate(decoded)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in item["loc"]) for item in exc.errors()})
        raise CredentialError(
            code="FIREBASE_KEY_INVALID",
            message=f"FIREBASE_KEY is missing or has invalid fields: {', '.join(fields)}.",
        ) from exc
    return key.model_dump(exclude_none=True)


def init_firebase(settings: Settings) -> FirebaseContext:
    service_account = parse_service_account(settings.firebase_key)
    try:
        certificate = credentials.Certificate(service_account)
    except ValueError as exc:
        raise CredentialError(
            code="FIREBASE_KEY_INVALID",
            message=f"FIREBASE_KEY could not be loaded as a service account: {exc}",
        ) from exc

    app = firebase_admin.initialize_app(certificate, name=settings.firebase_app_name)
    try:
        db = firestore.client(app=app)
    except Exception:
        firebase_admin.delete_app(app)
        raise

    logger.info(
        "firebase_initialized",
        extra={"project_id": service_account["project_id"], "app_name": app.name},
    )
    return FirebaseContext(app=app, db=db, project_id=service_account["project_id"])


def close_firebase(context: FirebaseContext) -> None:
    firebase_admin.delete_app(context.app)
