"""Composition root for the decision engine used by the API."""

import structlog

from src.config import Settings, settings
from src.domains.decision.config import DecisionConfig
from src.domains.decision.engine import DecisionEngine
from src.domains.decision.providers import (
    HeuristicProvider,
    LocalModelProvider,
    RemoteEndpointProvider,
    ScoringProvider,
)

logger = structlog.get_logger()


def build_providers(app_settings: Settings) -> list[ScoringProvider]:
    """Select provider variants from settings."""
    providers: list[ScoringProvider] = []

    if app_settings.heuristic_provider_enabled:
        providers.append(HeuristicProvider(timeout_seconds=app_settings.provider_timeout_seconds))

    if app_settings.local_model_enabled:
        local = LocalModelProvider(
            model_version=app_settings.local_model_version,
            timeout_seconds=app_settings.provider_timeout_seconds,
        )
        # Best-effort: an unloaded model is excluded from decisions and reported by /ready
        if app_settings.local_model_path:
            local.load_from_path(
                app_settings.local_model_path, model_version=app_settings.local_model_version
            )
        else:
            logger.warning("local_model_path_not_set", source_id=local.source_id)
        providers.append(local)

    if app_settings.remote_endpoint_url:
        headers = None
        if app_settings.remote_endpoint_api_key:
            headers = {"Authorization": f"Bearer {app_settings.remote_endpoint_api_key}"}
        providers.append(
            RemoteEndpointProvider(
                endpoint_url=app_settings.remote_endpoint_url,
                timeout_seconds=app_settings.provider_timeout_seconds,
                headers=headers,
            )
        )

    if not providers:
        logger.warning("no_scoring_providers_configured")
    return providers


def build_decision_engine(
    app_settings: Settings | None = None,
    config: DecisionConfig | None = None,
) -> DecisionEngine:
    app_settings = app_settings or settings
    return DecisionEngine(
        providers=build_providers(app_settings),
        config=config or DecisionConfig.from_env(),
        request_timeout_seconds=app_settings.request_timeout_seconds,
    )


# Module-level singleton, created at startup and read-only afterwards
_decision_engine: DecisionEngine | None = None


def set_decision_engine(engine: DecisionEngine | None) -> None:
    global _decision_engine
    _decision_engine = engine


def get_decision_engine() -> DecisionEngine:
    """Get or create the process-wide DecisionEngine."""
    global _decision_engine
    if _decision_engine is None:
        _decision_engine = build_decision_engine()
    return _decision_engine
