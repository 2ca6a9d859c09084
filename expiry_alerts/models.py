from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol


class ExpiryBucket(str, enum.Enum):
    WITHIN_1_DAY = "<=1day"
    WITHIN_3_DAYS = "2to3days"
    WITHIN_7_DAYS = "4to7days"


class JobStatus(str, enum.Enum):
    SENT = "SENT"
    NO_PRODUCTS = "NO_PRODUCTS"
    NO_TOKENS = "NO_TOKENS"


class DeletableReference(Protocol):
    def delete(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class Product:
    product_id: str
    status: str | None
    expiry_date: str | None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class DeviceRegistration:
    token: str
    reference: DeletableReference = field(repr=False, compare=False)
    path: str | None = None


@dataclass(frozen=True, slots=True)
class TokenFound:
    token: str


@dataclass(frozen=True, slots=True)
class TokenMissing:
    reason: str


TokenLookup = TokenFound | TokenMissing


@dataclass(frozen=True, slots=True)
class BucketCounts:
    within_1_day: int = 0
    within_3_days: int = 0
    within_7_days: int = 0

    @property
    def total(self) -> int:
        return self.within_1_day + self.within_3_days + self.within_7_days

    def to_dict(self) -> dict[str, int]:
        return {
            ExpiryBucket.WITHIN_1_DAY.value: self.within_1_day,
            ExpiryBucket.WITHIN_3_DAYS.value: self.within_3_days,
            ExpiryBucket.WITHIN_7_DAYS.value: self.within_7_days,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    title: str
    body: str
    link: str | None = None


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    token: str
    success: bool
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    success_count: int = 0
    failure_count: int = 0
    batch_count: int = 0
    stale_count: int = 0
    deleted_count: int = 0
    deletion_failed_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "batch_count": self.batch_count,
            "stale_count": self.stale_count,
            "deleted_count": self.deleted_count,
            "deletion_failed_count": self.deletion_failed_count,
        }


@dataclass(frozen=True, slots=True)
class JobReport:
    status: JobStatus
    reference_day: date
    buckets: BucketCounts
    token_count: int = 0
    dispatch: DispatchResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "reference_day": self.reference_day.isoformat(),
            "buckets": self.buckets.to_dict(),
            "token_count": self.token_count,
            "dispatch": self.dispatch.to_dict() if self.dispatch is not None else None,
        }
