"""Confidence-driven override policies."""

from ..config import DecisionConfig
from ..models import Action, AggregateResult, Transaction
from .base import OverridePolicy


class LowConfidenceReviewPolicy(OverridePolicy):
    policy_id = "low_confidence_review"
    tag = "low confidence, manual review"
    probability_band = (0.4, 0.7)

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        low, high = self.probability_band
        return (
            result.combined_confidence < config.confidence.low_confidence_threshold
            and low <= result.combined_probability <= high
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"recommended_action": Action.REVIEW}


class ConfidenceFloorPolicy(OverridePolicy):
    """No automatic decision below the configured confidence floor."""

    policy_id = "confidence_floor"
    tag = "confidence below auto-decision floor"

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        return (
            result.combined_confidence
            < config.confidence.minimum_confidence_for_auto_decision
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"recommended_action": Action.REVIEW}


class HighConfidenceFraudPolicy(OverridePolicy):
    """Confident fraud is declined outright, whatever earlier reviews said."""

    policy_id = "high_confidence_fraud"
    tag = "high-confidence fraud"
    probability_floor = 0.9
    confidence_floor = 0.8

    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        return (
            result.is_fraudulent
            and result.combined_probability >= self.probability_floor
            and result.combined_confidence >= self.confidence_floor
        )

    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        return {"recommended_action": Action.DECLINE}
