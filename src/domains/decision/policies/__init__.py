"""Override policy package.

Exports ALL_POLICIES, the one ordered sequence the policy engine applies.
Order is part of the contract: later policies overwrite fields set by
earlier ones.
"""

from .amount import HighValueReviewPolicy, SmallTransactionPolicy
from .base import AUDIT_PREFIX, OverridePolicy
from .confidence import (
    ConfidenceFloorPolicy,
    HighConfidenceFraudPolicy,
    LowConfidenceReviewPolicy,
)
from .temporal import BusinessHoursDampingPolicy

# All policy instances in evaluation order
ALL_POLICIES: tuple[OverridePolicy, ...] = (
    SmallTransactionPolicy(),
    BusinessHoursDampingPolicy(),
    LowConfidenceReviewPolicy(),
    HighValueReviewPolicy(),
    ConfidenceFloorPolicy(),
    HighConfidenceFraudPolicy(),
)

__all__ = [
    "ALL_POLICIES",
    "AUDIT_PREFIX",
    "OverridePolicy",
    "SmallTransactionPolicy",
    "BusinessHoursDampingPolicy",
    "LowConfidenceReviewPolicy",
    "HighValueReviewPolicy",
    "ConfidenceFloorPolicy",
    "HighConfidenceFraudPolicy",
]
