"""Transaction to model-input conversion shared by the model-backed providers."""

from .models import Transaction

FEATURE_NAMES: list[str] = [
    "amount",
    "transaction_count_last_24_hours",
    "amount_spent_last_24_hours",
    "time_since_last_transaction",
    "distance_from_last_transaction",
    "is_international",
    "is_high_risk_merchant",
    "hour_of_day",
    "day_of_week",
]


def _day_of_week(transaction: Transaction) -> int:
    # Sunday = 0
    return (transaction.timestamp.weekday() + 1) % 7


def transaction_features(transaction: Transaction) -> dict[str, float]:
    """Feature vector in ``FEATURE_NAMES`` order. Missing history defaults to 0."""
    return {
        "amount": float(transaction.amount),
        "transaction_count_last_24_hours": float(transaction.transaction_count_last_24_hours),
        "amount_spent_last_24_hours": float(transaction.amount_spent_last_24_hours),
        "time_since_last_transaction": float(transaction.time_since_last_transaction or 0.0),
        "distance_from_last_transaction": float(transaction.distance_from_last_transaction or 0.0),
        "is_international": 1.0 if transaction.is_international else 0.0,
        "is_high_risk_merchant": 1.0 if transaction.is_high_risk_merchant else 0.0,
        "hour_of_day": float(transaction.hour),
        "day_of_week": float(_day_of_week(transaction)),
    }


def to_csv_row(transaction: Transaction) -> str:
    """Single CSV row without header or label, as hosted XGBoost endpoints expect."""
    features = transaction_features(transaction)
    values = []
    for name in FEATURE_NAMES:
        value = features[name]
        values.append(str(int(value)) if value.is_integer() else repr(value))
    return ",".join(values)
