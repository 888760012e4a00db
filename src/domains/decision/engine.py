"""Decision pipeline: providers -> aggregate -> resolve -> override policies."""

import asyncio
import contextlib
from collections import Counter
from collections.abc import Sequence

import structlog

from .aggregator import aggregate
from .config import DecisionConfig, default_config
from .errors import InvalidConfiguration, NoProvidersAvailable, ProviderError, RequestTimeout
from .models import AggregateResult, ScoreResult, Transaction
from .policy_engine import apply_policies
from .providers import ScoringProvider
from .resolver import with_resolved_action

logger = structlog.get_logger()

DEFAULT_REQUEST_TIMEOUT_SECONDS = 5.0


class DecisionEngine:
    """Orchestrates the full decision pipeline for a transaction.

    Providers are called concurrently. Each call is bounded by the smaller
    of its own timeout and the time left before the request deadline. A
    provider that fails or times out is excluded from aggregation without
    affecting its siblings. Cancelling ``decide`` cancels every call still
    in flight.
    """

    def __init__(
        self,
        providers: Sequence[ScoringProvider],
        config: DecisionConfig | None = None,
        request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if request_timeout_seconds <= 0:
            raise InvalidConfiguration("request timeout must be positive")

        source_ids = [p.source_id for p in providers]
        duplicates = sorted(s for s, n in Counter(source_ids).items() if n > 1)
        if duplicates:
            raise InvalidConfiguration(f"duplicate provider source ids: {duplicates}")

        self._providers = tuple(providers)
        self._config = config or default_config
        self._request_timeout = request_timeout_seconds
        self._weights = self._config.weights_for(source_ids)

        logger.info(
            "decision_engine_initialized",
            providers=source_ids,
            weights=self._weights,
            request_timeout_seconds=request_timeout_seconds,
        )

    @property
    def providers(self) -> tuple[ScoringProvider, ...]:
        return self._providers

    @property
    def source_ids(self) -> list[str]:
        return [p.source_id for p in self._providers]

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    @property
    def config(self) -> DecisionConfig:
        return self._config

    async def decide(self, transaction: Transaction) -> AggregateResult:
        """Run the full decision pipeline for one transaction."""
        if not self._providers:
            raise NoProvidersAvailable("no scoring providers configured")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._request_timeout

        # 1. Fan out to every provider
        try:
            async with asyncio.timeout_at(deadline):
                outcomes = await asyncio.gather(
                    *(self._call_provider(p, transaction, deadline) for p in self._providers)
                )
        except TimeoutError as e:
            raise RequestTimeout(
                f"deadline of {self._request_timeout}s exceeded for "
                f"transaction {transaction.transaction_id}"
            ) from e

        if loop.time() >= deadline:
            raise RequestTimeout(
                f"deadline of {self._request_timeout}s exceeded before aggregation for "
                f"transaction {transaction.transaction_id}"
            )

        results = [r for r in outcomes if r is not None]
        if not results:
            raise NoProvidersAvailable(
                f"all {len(self._providers)} provider(s) failed for "
                f"transaction {transaction.transaction_id}"
            )

        # 2. Aggregate over the providers that answered
        weights = {r.source_id: self._weights[r.source_id] for r in results}
        aggregated = aggregate(results, weights, self._config)

        # 3. Fallback action ladder, then 4. ordered override policies
        resolved = with_resolved_action(aggregated)
        final = apply_policies(resolved, transaction, self._config)

        logger.info(
            "decision_made",
            transaction_id=transaction.transaction_id,
            sources_used=sorted(r.source_id for r in results),
            sources_failed=len(self._providers) - len(results),
            combined_probability=round(final.combined_probability, 4),
            combined_confidence=round(final.combined_confidence, 4),
            agreement=final.agreement,
            is_fraudulent=final.is_fraudulent,
            recommended_action=final.recommended_action.value if final.recommended_action else None,
            overrides=len(final.audit_tags),
        )
        return final

    async def decide_batch(self, transactions: Sequence[Transaction]) -> list[AggregateResult]:
        """Decide each transaction in input order. Any failure fails the batch."""
        decisions = []
        for transaction in transactions:
            decisions.append(await self.decide(transaction))

        logger.info(
            "batch_decided",
            total=len(decisions),
            flagged=sum(1 for d in decisions if d.is_fraudulent),
        )
        return decisions

    async def aclose(self) -> None:
        """Close every provider. A failing close does not stop the others."""
        for provider in self._providers:
            with contextlib.suppress(Exception):
                await provider.aclose()
        logger.info("decision_engine_closed", providers=self.source_ids)

    async def _call_provider(
        self,
        provider: ScoringProvider,
        transaction: Transaction,
        deadline: float,
    ) -> ScoreResult | None:
        """Call one provider, returning None if it fails in any way."""
        remaining = deadline - asyncio.get_running_loop().time()
        timeout = min(provider.timeout_seconds, remaining)
        if timeout <= 0:
            return None

        try:
            result = await asyncio.wait_for(provider.predict(transaction), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "provider_timeout",
                source_id=provider.source_id,
                transaction_id=transaction.transaction_id,
                timeout_seconds=round(timeout, 3),
            )
            return None
        except ProviderError as e:
            logger.warning(
                "provider_failed",
                source_id=provider.source_id,
                transaction_id=transaction.transaction_id,
                error=e.message,
            )
            return None
        except Exception:
            logger.exception(
                "provider_unexpected_error",
                source_id=provider.source_id,
                transaction_id=transaction.transaction_id,
            )
            return None

        if result.source_id != provider.source_id:
            logger.warning(
                "provider_source_mismatch",
                source_id=provider.source_id,
                reported_source_id=result.source_id,
                transaction_id=transaction.transaction_id,
            )
            return None

        logger.debug(
            "provider_scored",
            source_id=provider.source_id,
            transaction_id=transaction.transaction_id,
            probability=round(result.probability, 4),
            is_fraudulent=result.is_fraudulent,
        )
        return result
