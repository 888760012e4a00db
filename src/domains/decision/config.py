"""Decision engine configuration with sensible defaults.

Loaded once at process start and never mutated afterwards, so a single
instance is shared read-only across concurrent requests.
"""

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

import structlog

from .errors import InvalidConfiguration

logger = structlog.get_logger()


@dataclass(frozen=True)
class EnsembleThresholds:
    fraud_threshold: float = 0.5
    disagreement_threshold: float = 0.7
    agreement_spread: float = 0.2
    confidence_boost: float = 1.2
    confidence_penalty: float = 0.7


@dataclass(frozen=True)
class AmountThresholds:
    small_transaction_threshold: Decimal = Decimal("50")
    medium_transaction_threshold: Decimal = Decimal("500")
    high_value_transaction_threshold: Decimal = Decimal("5000")


@dataclass(frozen=True)
class ConfidenceThresholds:
    low_confidence_threshold: float = 0.3
    minimum_confidence_for_auto_decision: float = 0.4


@dataclass(frozen=True)
class BusinessHours:
    start: int = 8
    end: int = 20
    safe_transactions_per_day: int = 5
    max_transactions_per_day: int = 10


@dataclass(frozen=True)
class DecisionConfig:
    ensemble: EnsembleThresholds = field(default_factory=EnsembleThresholds)
    amount: AmountThresholds = field(default_factory=AmountThresholds)
    confidence: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)
    hours: BusinessHours = field(default_factory=BusinessHours)
    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        self._validate()

    def _validate(self) -> None:
        unit_interval = {
            "fraud_threshold": self.ensemble.fraud_threshold,
            "disagreement_threshold": self.ensemble.disagreement_threshold,
            "agreement_spread": self.ensemble.agreement_spread,
            "low_confidence_threshold": self.confidence.low_confidence_threshold,
            "minimum_confidence_for_auto_decision": (
                self.confidence.minimum_confidence_for_auto_decision
            ),
        }
        for name, value in unit_interval.items():
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must be within [0, 1], got {value}")

        for name in (
            "small_transaction_threshold",
            "medium_transaction_threshold",
            "high_value_transaction_threshold",
        ):
            value = getattr(self.amount, name)
            if value < 0:
                raise InvalidConfiguration(f"{name} must be non-negative, got {value}")

        for name in ("start", "end"):
            value = getattr(self.hours, name)
            if not 0 <= value <= 23:
                raise InvalidConfiguration(f"business_hour_{name} must be within 0-23, got {value}")
        if self.hours.start > self.hours.end:
            raise InvalidConfiguration(
                f"business_hour_start ({self.hours.start}) is after "
                f"business_hour_end ({self.hours.end})"
            )

        if self.ensemble.confidence_boost < 0 or self.ensemble.confidence_penalty < 0:
            raise InvalidConfiguration("confidence boost and penalty factors must be non-negative")

        for source_id, weight in self.weights.items():
            if weight < 0:
                raise InvalidConfiguration(f"weight for '{source_id}' must be non-negative")

    def weights_for(self, source_ids: Iterable[str]) -> dict[str, float]:
        """Resolve the weight table for the given providers.

        With no weights configured every provider gets an equal 1/N share.
        Once any weight is configured, every provider must have one.
        """
        source_ids = list(source_ids)
        if not source_ids:
            return {}

        if not self.weights:
            share = 1.0 / len(source_ids)
            return {source_id: share for source_id in source_ids}

        missing = [s for s in source_ids if s not in self.weights]
        if missing:
            raise InvalidConfiguration(f"no weight configured for provider(s): {missing}")

        unknown = sorted(set(self.weights) - set(source_ids))
        if unknown:
            logger.warning("weights_for_unknown_providers", source_ids=unknown)

        resolved = {source_id: self.weights[source_id] for source_id in source_ids}
        if sum(resolved.values()) <= 0:
            raise InvalidConfiguration("provider weights sum to zero")
        return resolved

    @classmethod
    def from_env(cls) -> "DecisionConfig":
        """Load config with env var overrides. Env vars use DECISION_ prefix."""
        try:
            ensemble: dict = {}
            if v := os.getenv("DECISION_FRAUD_THRESHOLD"):
                ensemble["fraud_threshold"] = float(v)
            if v := os.getenv("DECISION_DISAGREEMENT_THRESHOLD"):
                ensemble["disagreement_threshold"] = float(v)

            amount: dict = {}
            if v := os.getenv("DECISION_SMALL_TRANSACTION_THRESHOLD"):
                amount["small_transaction_threshold"] = Decimal(v)
            if v := os.getenv("DECISION_HIGH_VALUE_TRANSACTION_THRESHOLD"):
                amount["high_value_transaction_threshold"] = Decimal(v)

            confidence: dict = {}
            if v := os.getenv("DECISION_LOW_CONFIDENCE_THRESHOLD"):
                confidence["low_confidence_threshold"] = float(v)
            if v := os.getenv("DECISION_MINIMUM_CONFIDENCE_FOR_AUTO_DECISION"):
                confidence["minimum_confidence_for_auto_decision"] = float(v)

            hours: dict = {}
            if v := os.getenv("DECISION_BUSINESS_HOUR_START"):
                hours["start"] = int(v)
            if v := os.getenv("DECISION_BUSINESS_HOUR_END"):
                hours["end"] = int(v)

            weights: dict[str, float] = {}
            if v := os.getenv("DECISION_PROVIDER_WEIGHTS"):
                weights = parse_weights(v)
        except (ValueError, InvalidOperation) as e:
            raise InvalidConfiguration(f"malformed decision setting: {e}") from e

        return cls(
            ensemble=EnsembleThresholds(**ensemble),
            amount=AmountThresholds(**amount),
            confidence=ConfidenceThresholds(**confidence),
            hours=BusinessHours(**hours),
            weights=weights,
        )


def parse_weights(raw: str) -> dict[str, float]:
    """Parse ``"local_model=0.6,cloud_model=0.4"`` into a weight table."""
    weights: dict[str, float] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        source_id, sep, value = item.partition("=")
        if not sep or not source_id.strip():
            raise InvalidConfiguration(f"malformed provider weight entry: '{item}'")
        try:
            weights[source_id.strip()] = float(value)
        except ValueError as e:
            raise InvalidConfiguration(f"weight for '{source_id.strip()}' is not a number") from e
    return weights


# Module-level default instance
default_config = DecisionConfig()
