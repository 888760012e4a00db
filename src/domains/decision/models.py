"""Pydantic models for the decision domain."""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Action(StrEnum):
    APPROVE = "Approve"
    REVIEW = "Review"
    DECLINE = "Decline"


def merge_unique(*groups: Iterable[str]) -> tuple[str, ...]:
    """Union of string groups, first-seen order preserved."""
    return tuple(dict.fromkeys(item for group in groups for item in group))


class Transaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_id: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    timestamp: datetime
    is_international: bool = False
    is_high_risk_merchant: bool = False
    transaction_count_last_24_hours: int = Field(default=0, ge=0)
    amount_spent_last_24_hours: Decimal = Field(default=Decimal("0"), ge=0)
    # minutes
    time_since_last_transaction: float | None = Field(default=None, ge=0)
    distance_from_last_transaction: float | None = Field(default=None, ge=0)
    user_id: str | None = None
    merchant_name: str | None = None
    merchant_category: str | None = None
    country: str | None = None
    transaction_type: str | None = None

    @property
    def hour(self) -> int:
        return self.timestamp.hour


class ScoreResult(BaseModel):
    """One provider's verdict on one transaction."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(min_length=1)
    probability: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    is_fraudulent: bool
    risk_factors: tuple[str, ...] = ()

    @field_validator("risk_factors", mode="after")
    @classmethod
    def _dedupe_risk_factors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return merge_unique(v)


class AggregateResult(BaseModel):
    """Combined verdict threaded through the override policies.

    Field names are part of the audit contract and must stay stable.
    ``recommended_action`` is ``None`` until the resolver or a policy sets it.
    """

    model_config = ConfigDict(frozen=True)

    combined_probability: float = Field(ge=0.0, le=1.0)
    combined_confidence: float = Field(ge=0.0, le=1.0)
    agreement: bool
    is_fraudulent: bool
    risk_factors: tuple[str, ...] = ()
    recommended_action: Action | None = None
    audit_tags: tuple[str, ...] = ()

    @field_validator("risk_factors", mode="after")
    @classmethod
    def _dedupe_risk_factors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return merge_unique(v)


class DecisionRequest(BaseModel):
    transaction: Transaction
