"""In-process model scoring.

Wraps any already-trained estimator exposing ``predict_proba`` (or, failing
that, ``predict`` returning a probability), either handed in directly or
loaded from a joblib file. Training belongs to the caller; this provider
only serves predictions.
"""

import asyncio
import time
from typing import Any

import joblib
import numpy as np
import pandas as pd
import structlog

from ..errors import ProviderError
from ..features import FEATURE_NAMES, transaction_features
from ..models import ScoreResult, Transaction
from .base import ScoringProvider

logger = structlog.get_logger()


class LocalModelProvider(ScoringProvider):
    """Serves predictions from an in-memory model.

    Inference runs in a worker thread so a slow model never blocks the
    event loop or sibling provider calls.
    """

    def __init__(
        self,
        model: Any = None,
        model_version: str = "unknown",
        source_id: str = "local_model",
        timeout_seconds: float = 2.0,
    ) -> None:
        self.source_id = source_id
        self.timeout_seconds = timeout_seconds
        self._model = model
        self._model_version = model_version
        self._loaded_at: float = time.time() if model is not None else 0.0
        self._load_error: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    @property
    def model_version(self) -> str:
        return self._model_version

    @property
    def loaded_at(self) -> float:
        return self._loaded_at

    def load(self, model: Any, model_version: str = "unknown") -> None:
        """Swap in a new model. In-flight predictions keep the old one."""
        self._model = model
        self._model_version = model_version
        self._loaded_at = time.time()
        self._load_error = None
        logger.info("local_model_loaded", source_id=self.source_id, version=model_version)

    def load_from_path(self, path: str, model_version: str = "unknown") -> bool:
        """Load a serialized estimator from disk.

        Returns True if the model loaded, False otherwise. On failure the
        provider stays unloaded and is excluded from every decision until a
        later load succeeds.
        """
        try:
            model = joblib.load(path)
        except Exception as e:
            self._load_error = str(e)
            logger.warning(
                "local_model_load_failed",
                source_id=self.source_id,
                path=path,
                error=str(e),
            )
            return False

        self.load(model, model_version=model_version)
        return True

    @property
    def is_available(self) -> bool:
        return self.is_loaded

    def status(self) -> dict:
        return {
            **super().status(),
            "is_loaded": self.is_loaded,
            "model_version": self._model_version,
            "loaded_at": self._loaded_at or None,
            "load_error": self._load_error,
        }

    async def predict(self, transaction: Transaction) -> ScoreResult:
        model = self._model
        if model is None:
            raise ProviderError(self.source_id, "model not loaded")

        start = time.perf_counter()
        try:
            probability = await asyncio.to_thread(self._score, model, transaction)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.source_id, f"inference failed: {e}") from e

        logger.debug(
            "local_model_scored",
            source_id=self.source_id,
            transaction_id=transaction.transaction_id,
            probability=round(probability, 4),
            model_version=self._model_version,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return self._result_from_probability(transaction, probability)

    def _score(self, model: Any, transaction: Transaction) -> float:
        features = transaction_features(transaction)
        df = pd.DataFrame([features], columns=FEATURE_NAMES)

        if hasattr(model, "predict_proba"):
            raw = np.asarray(model.predict_proba(df), dtype=float)
            # Positive-class column for two-column classifier output
            score = raw[0, -1] if raw.ndim == 2 else raw[0]
        else:
            raw = model.predict(df)
            if isinstance(raw, np.ndarray):
                score = raw.ravel()[0]
            else:
                score = raw

        score = float(score)
        if not np.isfinite(score):
            raise ProviderError(self.source_id, f"model returned non-finite score {score}")
        return max(0.0, min(1.0, score))
