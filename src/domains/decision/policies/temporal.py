"""Time-of-day override policies."""

from ..config import DecisionConfig
from ..models import AggregateResult, Transaction
from .base import OverridePolicy


class BusinessHoursDampingPolicy(OverridePolicy):
    """Dampens the probability of ordinary daytime purchases.

    The fraud flag and the action are left as they are.
    """

    policy_id = "business_hours_damping"
    tag = "normal business-hours pattern"
    probability_ceiling = 0.6
    damping_factor = 0.8

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        return (
            config.hours.start <= transaction.hour <= config.hours.end
            and transaction.amount < config.amount.medium_transaction_threshold
            and transaction.transaction_count_last_24_hours
            <= config.hours.max_transactions_per_day
            and not transaction.is_high_risk_merchant
            and result.combined_probability < self.probability_ceiling
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"combined_probability": result.combined_probability * self.damping_factor}
