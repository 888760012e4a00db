"""Fallback action ladder for results that have no recommended action yet."""

from .models import Action, AggregateResult

DECLINE_PROBABILITY = 0.8
DECLINE_CONFIDENCE = 0.7
REVIEW_PROBABILITY = 0.5
UNCERTAIN_CONFIDENCE = 0.5
UNCERTAIN_PROBABILITY = 0.4


def resolve_action(result: AggregateResult) -> Action:
    """First match wins: decline, review band, uncertain review, approve."""
    probability = result.combined_probability
    confidence = result.combined_confidence

    if (
        probability >= DECLINE_PROBABILITY
        and confidence >= DECLINE_CONFIDENCE
        and result.agreement
    ):
        return Action.DECLINE
    if REVIEW_PROBABILITY <= probability < DECLINE_PROBABILITY:
        return Action.REVIEW
    if confidence < UNCERTAIN_CONFIDENCE and probability >= UNCERTAIN_PROBABILITY:
        return Action.REVIEW
    return Action.APPROVE


def with_resolved_action(result: AggregateResult) -> AggregateResult:
    """Fill in the action only when nothing has set one yet."""
    if result.recommended_action is not None:
        return result
    return result.model_copy(update={"recommended_action": resolve_action(result)})
