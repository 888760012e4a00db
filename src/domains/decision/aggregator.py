"""Combine per-provider score results into a single aggregate verdict."""

from collections.abc import Mapping, Sequence

import structlog

from .config import DecisionConfig, default_config
from .errors import InvalidConfiguration, NoProvidersAvailable
from .models import AggregateResult, ScoreResult, merge_unique

logger = structlog.get_logger()

# Probability spreads are compared at this precision so that 1.0 - 0.8 counts as 0.2
SPREAD_PRECISION = 9


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def aggregate(
    results: Sequence[ScoreResult],
    weights: Mapping[str, float],
    config: DecisionConfig | None = None,
) -> AggregateResult:
    """Aggregate provider results with weighted averaging and agreement logic.

    Pure function of its inputs. Results are ordered by ``source_id`` before
    combining, so arrival order never changes the outcome.

    - Single result: passed through unchanged, agreement is true by definition.
    - Several results: weighted average normalized by the contributing weights.
      Consensus with a small probability spread boosts confidence, anything
      else penalizes it. When providers disagree the stricter disagreement
      threshold decides the fraud flag.

    The recommended action is always left unset.
    """
    cfg = config or default_config

    if not results:
        raise NoProvidersAvailable("no score results to aggregate")

    ordered = sorted(results, key=lambda r: r.source_id)

    if len(ordered) == 1:
        only = ordered[0]
        return AggregateResult(
            combined_probability=only.probability,
            combined_confidence=only.confidence,
            agreement=True,
            is_fraudulent=only.is_fraudulent,
            risk_factors=only.risk_factors,
        )

    missing = [r.source_id for r in ordered if r.source_id not in weights]
    if missing:
        raise InvalidConfiguration(f"no weight configured for provider(s): {missing}")

    total_weight = sum(weights[r.source_id] for r in ordered)
    if total_weight <= 0:
        raise NoProvidersAvailable(
            "responding providers all carry zero weight: "
            f"{[r.source_id for r in ordered]}"
        )

    weighted_sum = sum(r.probability * weights[r.source_id] for r in ordered)
    combined_probability = _clamp(weighted_sum / total_weight)

    agreement = len({r.is_fraudulent for r in ordered}) == 1
    probabilities = [r.probability for r in ordered]
    probability_difference = round(max(probabilities) - min(probabilities), SPREAD_PRECISION)

    min_confidence = min(r.confidence for r in ordered)
    ensemble = cfg.ensemble
    if agreement and probability_difference < ensemble.agreement_spread:
        combined_confidence = _clamp(min_confidence * ensemble.confidence_boost)
    else:
        combined_confidence = _clamp(min_confidence * ensemble.confidence_penalty)

    threshold = ensemble.fraud_threshold if agreement else ensemble.disagreement_threshold
    is_fraudulent = combined_probability >= threshold

    logger.debug(
        "scores_aggregated",
        source_ids=[r.source_id for r in ordered],
        combined_probability=round(combined_probability, 4),
        combined_confidence=round(combined_confidence, 4),
        agreement=agreement,
        probability_difference=round(probability_difference, 4),
        threshold=threshold,
    )

    return AggregateResult(
        combined_probability=combined_probability,
        combined_confidence=combined_confidence,
        agreement=agreement,
        is_fraudulent=is_fraudulent,
        risk_factors=merge_unique(*(r.risk_factors for r in ordered)),
    )
