"""Deterministic signal-based scorer for running without a trained model."""

from decimal import Decimal

from ..models import ScoreResult, Transaction
from .base import ScoringProvider

HIGH_RISK_COUNTRIES = frozenset({"NG", "RU", "CN", "BR"})

SIGNAL_WEIGHTS: dict[str, float] = {
    "amount_anomaly": 0.35,
    "velocity_risk": 0.25,
    "pattern_deviation": 0.25,
    "geo_risk": 0.15,
}


class HeuristicProvider(ScoringProvider):
    """Blends four transaction signals into a fraud probability."""

    def __init__(self, source_id: str = "heuristic", timeout_seconds: float = 1.0) -> None:
        self.source_id = source_id
        self.timeout_seconds = timeout_seconds

    async def predict(self, transaction: Transaction) -> ScoreResult:
        signals = compute_signals(transaction)
        probability = sum(signals[name] * weight for name, weight in SIGNAL_WEIGHTS.items())
        return self._result_from_probability(transaction, round(probability, 4))


def compute_signals(transaction: Transaction) -> dict[str, float]:
    amount = transaction.amount
    if amount > Decimal("5000"):
        amount_anomaly = min(0.95, 0.5 + float(amount - Decimal("5000")) / 20000)
    elif amount < Decimal("10"):
        amount_anomaly = 0.6
    else:
        amount_anomaly = max(0.1, min(0.4, float(amount) / 10000))

    velocity_risk = min(0.9, 0.1 + transaction.transaction_count_last_24_hours * 0.04)
    if transaction.hour < 6:
        velocity_risk = max(velocity_risk, 0.5)

    pattern_deviation = 0.75 if transaction.is_high_risk_merchant else 0.2

    country = (transaction.country or "").upper()
    if country in HIGH_RISK_COUNTRIES:
        geo_risk = 0.7
    elif transaction.is_international:
        geo_risk = 0.5
    else:
        geo_risk = 0.15
    if (transaction.distance_from_last_transaction or 0.0) > 500:
        geo_risk = max(geo_risk, 0.6)

    return {
        "amount_anomaly": round(amount_anomaly, 4),
        "velocity_risk": round(velocity_risk, 4),
        "pattern_deviation": round(pattern_deviation, 4),
        "geo_risk": round(geo_risk, 4),
    }
