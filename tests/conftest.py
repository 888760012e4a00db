"""Shared test fixtures for decision engine tests."""

import asyncio
import os
from datetime import datetime
from decimal import Decimal

import pytest

from src.domains.decision.errors import ProviderError
from src.domains.decision.models import ScoreResult, Transaction
from src.domains.decision.providers import ScoringProvider

os.environ.setdefault("HEURISTIC_PROVIDER_ENABLED", "true")
os.environ.setdefault("REQUEST_TIMEOUT_SECONDS", "5.0")

# Wednesday, 14:00
NOON_ISH = datetime(2026, 1, 14, 14, 0, 0)
# Wednesday, 02:00
NIGHT = datetime(2026, 1, 14, 2, 0, 0)


def make_transaction(**kwargs) -> Transaction:
    defaults = {
        "transaction_id": "txn-1",
        "amount": Decimal("100.00"),
        "timestamp": NIGHT,
        "is_international": False,
        "is_high_risk_merchant": False,
        "transaction_count_last_24_hours": 2,
    }
    defaults.update(kwargs)
    return Transaction(**defaults)


def make_score(source_id: str = "local_model", **kwargs) -> ScoreResult:
    defaults = {
        "probability": 0.2,
        "confidence": 0.8,
        "is_fraudulent": False,
        "risk_factors": (),
    }
    defaults.update(kwargs)
    return ScoreResult(source_id=source_id, **defaults)


class StaticProvider(ScoringProvider):
    """Returns a fixed result after an optional delay."""

    def __init__(
        self,
        source_id: str,
        probability: float = 0.2,
        confidence: float = 0.8,
        is_fraudulent: bool | None = None,
        risk_factors: tuple[str, ...] = (),
        delay: float = 0.0,
        timeout_seconds: float = 2.0,
    ) -> None:
        self.source_id = source_id
        self.timeout_seconds = timeout_seconds
        self.delay = delay
        self.calls = 0
        self.cancelled = False
        self._result = ScoreResult(
            source_id=source_id,
            probability=probability,
            confidence=confidence,
            is_fraudulent=probability >= 0.5 if is_fraudulent is None else is_fraudulent,
            risk_factors=risk_factors,
        )

    async def predict(self, transaction: Transaction) -> ScoreResult:
        self.calls += 1
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self._result


class FailingProvider(ScoringProvider):
    def __init__(self, source_id: str, error: Exception | None = None) -> None:
        self.source_id = source_id
        self.timeout_seconds = 2.0
        self._error = error or ProviderError(source_id, "endpoint unavailable")

    async def predict(self, transaction: Transaction) -> ScoreResult:
        raise self._error


@pytest.fixture
def transaction() -> Transaction:
    return make_transaction()


@pytest.fixture
def sample_transaction_payload() -> dict:
    return {
        "transaction_id": "550e8400-e29b-41d4-a716-446655440000",
        "amount": "20.00",
        "timestamp": "2026-01-14T02:00:00",
        "is_international": False,
        "is_high_risk_merchant": False,
        "transaction_count_last_24_hours": 2,
        "merchant_name": "Corner Grocery",
        "country": "US",
    }
