"""Human-readable risk factor labelling for a scored transaction."""

from decimal import Decimal

from .models import Transaction

HIGH_AMOUNT = "High transaction amount"
INTERNATIONAL = "International transaction"
HIGH_RISK_MERCHANT = "High-risk merchant category"
UNUSUAL_FREQUENCY = "Unusual transaction frequency"
LARGE_DISTANCE = "Large distance from previous transaction"
UNUSUAL_TIME = "Unusual transaction time"

MIN_PROBABILITY = 0.3
HIGH_AMOUNT_MIN = Decimal("1000")
FREQUENCY_MAX = 10
DISTANCE_MAX = 500.0
EARLIEST_NORMAL_HOUR = 6


def identify_risk_factors(transaction: Transaction, probability: float) -> list[str]:
    """Label the signals behind a score. Low scores carry no factors."""
    if probability < MIN_PROBABILITY:
        return []

    factors: list[str] = []
    if transaction.amount > HIGH_AMOUNT_MIN:
        factors.append(HIGH_AMOUNT)
    if transaction.is_international:
        factors.append(INTERNATIONAL)
    if transaction.is_high_risk_merchant:
        factors.append(HIGH_RISK_MERCHANT)
    if transaction.transaction_count_last_24_hours > FREQUENCY_MAX:
        factors.append(UNUSUAL_FREQUENCY)
    if (
        transaction.distance_from_last_transaction is not None
        and transaction.distance_from_last_transaction > DISTANCE_MAX
    ):
        factors.append(LARGE_DISTANCE)
    if transaction.hour < EARLIEST_NORMAL_HOUR:
        factors.append(UNUSUAL_TIME)
    return factors
