"""Unit tests for the decision engine orchestration."""

import asyncio
from decimal import Decimal

import pytest

from src.domains.decision.config import DecisionConfig
from src.domains.decision.engine import DecisionEngine
from src.domains.decision.errors import (
    ErrorKind,
    InvalidConfiguration,
    NoProvidersAvailable,
    ProviderError,
    RequestTimeout,
)
from src.domains.decision.models import Action
from tests.conftest import FailingProvider, StaticProvider, make_transaction

CONFIG = DecisionConfig()


class TestConstruction:
    def test_duplicate_source_ids_rejected(self):
        with pytest.raises(InvalidConfiguration):
            DecisionEngine([StaticProvider("local_model"), StaticProvider("local_model")])

    def test_missing_weight_rejected_at_construction(self):
        config = DecisionConfig(weights={"local_model": 1.0})
        with pytest.raises(InvalidConfiguration):
            DecisionEngine(
                [StaticProvider("local_model"), StaticProvider("cloud_model")], config=config
            )

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(InvalidConfiguration):
            DecisionEngine([StaticProvider("local_model")], request_timeout_seconds=0)

    def test_equal_weights_by_default(self):
        engine = DecisionEngine([StaticProvider("local_model"), StaticProvider("cloud_model")])
        assert engine.weights == {"local_model": 0.5, "cloud_model": 0.5}
        assert engine.source_ids == ["local_model", "cloud_model"]


class TestDecide:
    @pytest.mark.asyncio
    async def test_no_providers_configured(self):
        engine = DecisionEngine([], config=CONFIG)
        with pytest.raises(NoProvidersAvailable) as exc_info:
            await engine.decide(make_transaction())
        assert exc_info.value.kind == ErrorKind.NO_PROVIDERS_AVAILABLE

    @pytest.mark.asyncio
    async def test_two_agreeing_providers(self):
        engine = DecisionEngine(
            [
                StaticProvider("local_model", probability=0.20, confidence=0.8),
                StaticProvider("cloud_model", probability=0.25, confidence=0.75),
            ],
            config=CONFIG,
        )
        result = await engine.decide(make_transaction(amount=Decimal("250")))

        assert result.combined_probability == pytest.approx(0.225)
        assert result.combined_confidence == pytest.approx(0.9)
        assert result.agreement is True
        assert result.is_fraudulent is False
        assert result.recommended_action == Action.APPROVE
        assert result.audit_tags == ()

    @pytest.mark.asyncio
    async def test_single_provider_uses_action_ladder(self):
        engine = DecisionEngine(
            [StaticProvider("local_model", probability=0.6, confidence=0.8)], config=CONFIG
        )
        result = await engine.decide(make_transaction(amount=Decimal("250")))

        assert result.combined_probability == 0.6
        assert result.recommended_action == Action.REVIEW

    @pytest.mark.asyncio
    async def test_spread_at_limit_is_reviewed_not_declined(self):
        engine = DecisionEngine(
            [
                StaticProvider("local_model", probability=0.8, confidence=0.7),
                StaticProvider("cloud_model", probability=1.0, confidence=0.7),
            ],
            config=CONFIG,
        )
        result = await engine.decide(make_transaction(amount=Decimal("250")))

        assert result.combined_probability == pytest.approx(0.9)
        assert result.combined_confidence == pytest.approx(0.49)
        assert result.recommended_action == Action.REVIEW
        assert result.audit_tags == ()

    @pytest.mark.asyncio
    async def test_small_safe_pattern_approves(self):
        engine = DecisionEngine(
            [StaticProvider("local_model", probability=0.5, confidence=0.8)], config=CONFIG
        )
        result = await engine.decide(
            make_transaction(amount=Decimal("20"), transaction_count_last_24_hours=2)
        )
        assert result.is_fraudulent is False
        assert result.recommended_action == Action.APPROVE

    @pytest.mark.asyncio
    async def test_high_value_forced_review(self):
        engine = DecisionEngine(
            [StaticProvider("local_model", probability=0.35, confidence=0.8)], config=CONFIG
        )
        result = await engine.decide(make_transaction(amount=Decimal("6000")))
        assert result.recommended_action == Action.REVIEW

    @pytest.mark.asyncio
    async def test_confident_fraud_declined(self):
        engine = DecisionEngine(
            [
                StaticProvider("local_model", probability=0.95, confidence=0.9),
                StaticProvider("cloud_model", probability=0.97, confidence=0.85),
            ],
            config=CONFIG,
        )
        result = await engine.decide(make_transaction(amount=Decimal("6000")))

        assert result.is_fraudulent is True
        assert result.recommended_action == Action.DECLINE
        assert result.audit_tags[-1] == "Override: high-confidence fraud"


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_failed_provider_excluded(self):
        healthy = StaticProvider("local_model", probability=0.6, confidence=0.8)
        engine = DecisionEngine([healthy, FailingProvider("cloud_model")], config=CONFIG)

        result = await engine.decide(make_transaction(amount=Decimal("250")))

        assert healthy.calls == 1
        # Single survivor passes straight through
        assert result.combined_probability == 0.6
        assert result.agreement is True

    @pytest.mark.asyncio
    async def test_unexpected_provider_exception_excluded(self):
        engine = DecisionEngine(
            [
                StaticProvider("local_model", probability=0.3),
                FailingProvider("cloud_model", error=RuntimeError("boom")),
            ],
            config=CONFIG,
        )
        result = await engine.decide(make_transaction(amount=Decimal("250")))
        assert result.combined_probability == 0.3

    @pytest.mark.asyncio
    async def test_all_providers_failed(self):
        engine = DecisionEngine(
            [FailingProvider("local_model"), FailingProvider("cloud_model")], config=CONFIG
        )
        with pytest.raises(NoProvidersAvailable):
            await engine.decide(make_transaction())

    @pytest.mark.asyncio
    async def test_slow_provider_excluded_on_its_own_timeout(self):
        fast = StaticProvider("local_model", probability=0.4)
        slow = StaticProvider("cloud_model", probability=0.9, delay=1.0, timeout_seconds=0.05)
        engine = DecisionEngine([fast, slow], config=CONFIG, request_timeout_seconds=2.0)

        result = await engine.decide(make_transaction(amount=Decimal("250")))

        assert result.combined_probability == 0.4
        assert slow.cancelled is True

    @pytest.mark.asyncio
    async def test_mismatched_source_id_excluded(self):
        class Impostor(StaticProvider):
            async def predict(self, transaction):
                result = await super().predict(transaction)
                return result.model_copy(update={"source_id": "someone_else"})

        engine = DecisionEngine(
            [StaticProvider("local_model", probability=0.3), Impostor("cloud_model")],
            config=CONFIG,
        )
        result = await engine.decide(make_transaction(amount=Decimal("250")))
        assert result.combined_probability == 0.3

    def test_provider_error_carries_kind(self):
        error = ProviderError("cloud_model", "503 from endpoint")
        assert error.kind == ErrorKind.PROVIDER_ERROR
        assert error.source_id == "cloud_model"


class TestDeadline:
    @pytest.mark.asyncio
    async def test_request_deadline_raises_timeout(self):
        engine = DecisionEngine(
            [
                StaticProvider("local_model", delay=1.0, timeout_seconds=5.0),
                StaticProvider("cloud_model", delay=1.0, timeout_seconds=5.0),
            ],
            config=CONFIG,
            request_timeout_seconds=0.05,
        )
        with pytest.raises(RequestTimeout) as exc_info:
            await engine.decide(make_transaction())
        assert exc_info.value.kind == ErrorKind.REQUEST_TIMEOUT

    @pytest.mark.asyncio
    async def test_cancellation_propagates_to_providers(self):
        slow_a = StaticProvider("local_model", delay=5.0, timeout_seconds=10.0)
        slow_b = StaticProvider("cloud_model", delay=5.0, timeout_seconds=10.0)
        engine = DecisionEngine([slow_a, slow_b], config=CONFIG, request_timeout_seconds=10.0)

        task = asyncio.create_task(engine.decide(make_transaction()))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert slow_a.cancelled is True
        assert slow_b.cancelled is True


class TestDeterminism:
    @pytest.mark.asyncio
    async def test_completion_order_does_not_change_result(self):
        def providers(first_delay, second_delay):
            return [
                StaticProvider("local_model", probability=0.62, confidence=0.7,
                               risk_factors=("International transaction",), delay=first_delay),
                StaticProvider("cloud_model", probability=0.48, confidence=0.6,
                               risk_factors=("High transaction amount",), delay=second_delay),
            ]

        txn = make_transaction(amount=Decimal("1500"), is_international=True)
        a = await DecisionEngine(providers(0.0, 0.05), config=CONFIG).decide(txn)
        b = await DecisionEngine(providers(0.05, 0.0), config=CONFIG).decide(txn)
        assert a == b


class TestDecideBatch:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        engine = DecisionEngine([StaticProvider("local_model", probability=0.35)], config=CONFIG)
        txns = [
            make_transaction(transaction_id="t1", amount=Decimal("250")),
            make_transaction(transaction_id="t2", amount=Decimal("6000")),
        ]
        results = await engine.decide_batch(txns)

        assert [r.recommended_action for r in results] == [Action.APPROVE, Action.REVIEW]

    @pytest.mark.asyncio
    async def test_failure_fails_whole_batch(self):
        engine = DecisionEngine([FailingProvider("local_model")], config=CONFIG)
        with pytest.raises(NoProvidersAvailable):
            await engine.decide_batch([make_transaction()])
