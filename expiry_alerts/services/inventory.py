from __future__ import annotations

import logging
from typing import Any

from google.cloud.firestore_v1.base_query import FieldFilter

from expiry_alerts.models import Product

logger = logging.getLogger("expiry_alerts.inventory")

STATUS_FIELD = "status"
EXPIRY_DATE_FIELD = "expiryDate"


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _product_from_snapshot(snapshot: Any) -> Product:
    data = snapshot.to_dict() or {}
    expiry_date = data.get(EXPIRY_DATE_FIELD)
    return Product(
        product_id=str(snapshot.id),
        status=_optional_str(data.get(STATUS_FIELD)),
        expiry_date=expiry_date if isinstance(expiry_date, str) else None,
        name=_optional_str(data.get("name")),
    )


def fetch_expiring_products(
    db: Any,
    *,
    cutoff: str,
    collection: str = "products",
    active_status: str = "ACTIVE",
) -> list[Product]:
    # expiryDate is stored as zero-padded YYYY-MM-DD, so string order is date order.
    query = (
        db.collection(collection)
        .where(filter=FieldFilter(STATUS_FIELD, "==", active_status))
        .where(filter=FieldFilter(EXPIRY_DATE_FIELD, "<=", cutoff))
    )
    products = [_product_from_snapshot(snapshot) for snapshot in query.stream()]
    logger.info(
        "expiring_products_loaded",
        extra={"collection": collection, "cutoff": cutoff, "product_count": len(products)},
    )
    return products
