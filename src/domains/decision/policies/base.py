"""Abstract base class for override policies."""

from abc import ABC, abstractmethod

from ..config import DecisionConfig
from ..models import AggregateResult, Transaction, merge_unique

AUDIT_PREFIX = "Override: "


class OverridePolicy(ABC):
    """A business rule that may force a different outcome than the raw score.

    Policies never mutate their input. A triggered policy returns a new
    result carrying its field changes plus its audit tag, which is appended
    to ``audit_tags`` and merged into ``risk_factors``. A policy whose tag is
    already present has fired before and is not applied again.
    """

    policy_id: str
    tag: str

    @property
    def audit_tag(self) -> str:
        return f"{AUDIT_PREFIX}{self.tag}"

    @abstractmethod
    def applies(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> bool:
        """Whether this policy's conditions hold for the result."""
        ...

    @abstractmethod
    def changes(self, result: AggregateResult, config: DecisionConfig) -> dict:
        """Field updates this policy makes when it fires."""
        ...

    def evaluate(
        self,
        result: AggregateResult,
        transaction: Transaction,
        config: DecisionConfig,
    ) -> AggregateResult:
        if self.audit_tag in result.audit_tags:
            return result
        if not self.applies(result, transaction, config):
            return result

        update = self.changes(result, config)
        update["audit_tags"] = (*result.audit_tags, self.audit_tag)
        update["risk_factors"] = merge_unique(result.risk_factors, (self.audit_tag,))
        return result.model_copy(update=update)
