from __future__ import annotations

import logging
import os
import sys

from pydantic import ValidationError

from expiry_alerts.errors import ConfigurationError, CredentialError
from expiry_alerts.firebase import close_firebase, init_firebase
from expiry_alerts.logging_utils import setup_json_logging
from expiry_alerts.services.expiry_alert_job import run_expiry_alert_job
from expiry_alerts.settings import get_settings

logger = logging.getLogger("expiry_alerts.main")

EXIT_OK = 0
EXIT_FAILED = 1


def main() -> int:
    run_id = setup_json_logging(os.getenv("LOG_LEVEL") or "INFO")
    try:
        settings = get_settings()
    except ValidationError as exc:
        error = ConfigurationError(code="INVALID_SETTINGS", message=str(exc))
        logger.error("settings_load_failed", extra=error.to_log_extra())
        return EXIT_FAILED

    setup_json_logging(settings.log_level, run_id=run_id)

    try:
        context = init_firebase(settings)
    except CredentialError as exc:
        logger.error("credential_load_failed", extra=exc.to_log_extra())
        return EXIT_FAILED
    except Exception:
        logger.exception("firebase_init_failed")
        return EXIT_FAILED

    try:
        report = run_expiry_alert_job(context, settings=settings)
    except Exception:
        logger.exception("expiry_alert_job_failed")
        return EXIT_FAILED
    finally:
        close_firebase(context)

    logger.info("expiry_alert_job_finished", extra={"report": report.to_dict()})
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
