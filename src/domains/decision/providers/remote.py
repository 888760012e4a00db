"""Hosted inference endpoint scoring over HTTP."""

import time

import httpx
import structlog

from ..errors import ProviderError
from ..features import to_csv_row
from ..models import ScoreResult, Transaction
from .base import ScoringProvider

logger = structlog.get_logger()


class RemoteEndpointProvider(ScoringProvider):
    """Scores transactions against a cloud-hosted model endpoint.

    The endpoint receives one ``text/csv`` feature row and answers with the
    fraud probability as a bare number. One client is shared across requests
    and closed by ``aclose`` on shutdown.
    """

    def __init__(
        self,
        endpoint_url: str,
        source_id: str = "cloud_model",
        timeout_seconds: float = 2.0,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.source_id = source_id
        self.timeout_seconds = timeout_seconds
        self._endpoint_url = endpoint_url
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._headers = {"Content-Type": "text/csv", "Accept": "text/csv"}
        if headers:
            self._headers.update(headers)

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    def status(self) -> dict:
        return {**super().status(), "endpoint_url": self._endpoint_url}

    async def predict(self, transaction: Transaction) -> ScoreResult:
        body = to_csv_row(transaction)
        start = time.perf_counter()

        try:
            response = await self._client.post(
                self._endpoint_url, content=body, headers=self._headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.source_id, f"endpoint returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(self.source_id, f"endpoint unreachable: {e}") from e

        probability = self._parse_probability(response.text)

        logger.debug(
            "remote_endpoint_scored",
            source_id=self.source_id,
            transaction_id=transaction.transaction_id,
            probability=round(probability, 4),
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return self._result_from_probability(transaction, probability)

    def _parse_probability(self, text: str) -> float:
        # Some containers answer with a trailing newline or a one-row CSV
        first = text.strip().split(",")[0].strip()
        try:
            probability = float(first)
        except ValueError as e:
            raise ProviderError(self.source_id, f"unparseable response body: {text!r}") from e
        if not 0.0 <= probability <= 1.0:
            raise ProviderError(self.source_id, f"probability out of range: {probability}")
        return probability

    async def aclose(self) -> None:
        await self._client.aclose()
