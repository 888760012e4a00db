"""Amount-based override policies: small safe transactions, high-value review."""

from ..config import DecisionConfig
from ..models import Action, AggregateResult, Transaction
from .base import OverridePolicy


class SmallTransactionPolicy(OverridePolicy):
    """Small domestic purchase at a low-risk merchant with normal velocity."""

    policy_id = "small_transaction_safe_pattern"
    tag = "small amount at low-risk merchant"
    probability_ceiling = 0.7

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        return (
            transaction.amount < config.amount.small_transaction_threshold
            and not transaction.is_international
            and not transaction.is_high_risk_merchant
            and transaction.transaction_count_last_24_hours
            <= config.hours.safe_transactions_per_day
            and result.combined_probability < self.probability_ceiling
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"is_fraudulent": False, "recommended_action": Action.APPROVE}


class HighValueReviewPolicy(OverridePolicy):
    """High-value transactions with any meaningful risk go to a reviewer."""

    policy_id = "high_value_review"
    tag = "high-value transaction requires review"
    probability_floor = 0.3

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        return (
            transaction.amount >= config.amount.high_value_transaction_threshold
            and result.combined_probability >= self.probability_floor
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"recommended_action": Action.REVIEW}
