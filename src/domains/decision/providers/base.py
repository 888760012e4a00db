"""Scoring provider capability shared by every scoring backend."""

from abc import ABC, abstractmethod

from ..models import ScoreResult, Transaction
from ..risk_analyzer import identify_risk_factors

FRAUD_CUTOFF = 0.5


class ScoringProvider(ABC):
    """One source of fraud scores.

    Implementations raise ``ProviderError`` on any failure. The engine never
    branches on which implementation it is talking to.
    """

    source_id: str
    timeout_seconds: float = 2.0

    @abstractmethod
    async def predict(self, transaction: Transaction) -> ScoreResult:
        """Score a single transaction."""
        ...

    @property
    def is_available(self) -> bool:
        """Whether the provider can currently serve predictions."""
        return True

    def status(self) -> dict:
        """Readiness details reported by the health endpoints."""
        return {
            "source_id": self.source_id,
            "available": self.is_available,
            "timeout_seconds": self.timeout_seconds,
        }

    async def aclose(self) -> None:
        """Release held resources. Called once on shutdown."""
        return None

    def _result_from_probability(
        self,
        transaction: Transaction,
        probability: float,
    ) -> ScoreResult:
        """Build a result from a raw probability.

        Confidence is the distance from the 0.5 cut-off scaled to [0, 1].
        """
        probability = max(0.0, min(1.0, probability))
        return ScoreResult(
            source_id=self.source_id,
            probability=probability,
            confidence=min(1.0, abs(probability - FRAUD_CUTOFF) * 2),
            is_fraudulent=probability >= FRAUD_CUTOFF,
            risk_factors=tuple(identify_risk_factors(transaction, probability)),
        )
