"""Sequential override policy engine."""

from collections.abc import Sequence

import structlog

from .config import DecisionConfig, default_config
from .models import AggregateResult, Transaction
from .policies import ALL_POLICIES, OverridePolicy

logger = structlog.get_logger()


def apply_policies(
    result: AggregateResult,
    transaction: Transaction,
    config: DecisionConfig | None = None,
    policies: Sequence[OverridePolicy] = ALL_POLICIES,
) -> AggregateResult:
    """Thread the result through every policy in order.

    Each policy sees the output of the one before it, so a later policy
    wins over an earlier one that set the same field. Re-running on an
    already processed result appends no new tags unless a policy that has
    not fired yet now holds.
    """
    cfg = config or default_config
    current = result

    for policy in policies:
        updated = policy.evaluate(current, transaction, cfg)
        if updated is not current:
            logger.debug(
                "policy_applied",
                transaction_id=transaction.transaction_id,
                policy_id=policy.policy_id,
                recommended_action=(
                    updated.recommended_action.value if updated.recommended_action else None
                ),
                combined_probability=round(updated.combined_probability, 4),
            )
        current = updated

    return current
