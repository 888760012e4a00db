"""Fraud decision endpoints backed by the ensemble decision engine."""

import structlog
from fastapi import APIRouter, Depends

from src.api.dependencies import get_decision_engine
from src.domains.decision.engine import DecisionEngine
from src.domains.decision.models import AggregateResult, DecisionRequest, Transaction
from src.domains.decision.policies import ALL_POLICIES

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/decisions", tags=["decisions"])


@router.post("/analyze", response_model=AggregateResult)
async def analyze_transaction(
    request: DecisionRequest,
    engine: DecisionEngine = Depends(get_decision_engine),  # noqa: B008
) -> AggregateResult:
    """Decide approve / review / decline for a single transaction."""
    logger.info("analyzing_transaction", transaction_id=request.transaction.transaction_id)
    return await engine.decide(request.transaction)


@router.post("/analyze/batch", response_model=list[AggregateResult])
async def analyze_batch(
    transactions: list[Transaction],
    engine: DecisionEngine = Depends(get_decision_engine),  # noqa: B008
) -> list[AggregateResult]:
    logger.info("analyzing_batch", count=len(transactions))
    return await engine.decide_batch(transactions)


@router.get("/policies")
async def list_policies(
    engine: DecisionEngine = Depends(get_decision_engine),  # noqa: B008
) -> dict:
    """Return the ordered override policies, thresholds and provider weights."""
    config = engine.config
    return {
        "policies": [
            {"order": i, "policy_id": p.policy_id, "audit_tag": p.audit_tag}
            for i, p in enumerate(ALL_POLICIES, start=1)
        ],
        "thresholds": {
            "fraud_threshold": config.ensemble.fraud_threshold,
            "disagreement_threshold": config.ensemble.disagreement_threshold,
            "small_transaction_threshold": str(config.amount.small_transaction_threshold),
            "high_value_transaction_threshold": str(
                config.amount.high_value_transaction_threshold
            ),
            "low_confidence_threshold": config.confidence.low_confidence_threshold,
            "minimum_confidence_for_auto_decision": (
                config.confidence.minimum_confidence_for_auto_decision
            ),
            "business_hour_start": config.hours.start,
            "business_hour_end": config.hours.end,
        },
        "providers": engine.source_ids,
        "weights": engine.weights,
    }
