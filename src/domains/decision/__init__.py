"""Ensemble fraud decision domain."""

from .aggregator import aggregate
from .config import DecisionConfig, default_config
from .engine import DecisionEngine
from .errors import (
    DecisionError,
    ErrorKind,
    InvalidConfiguration,
    NoProvidersAvailable,
    ProviderError,
    RequestTimeout,
)
from .models import Action, AggregateResult, ScoreResult, Transaction
from .policies import ALL_POLICIES
from .policy_engine import apply_policies
from .resolver import resolve_action

__all__ = [
    "ALL_POLICIES",
    "Action",
    "AggregateResult",
    "DecisionConfig",
    "DecisionEngine",
    "DecisionError",
    "ErrorKind",
    "InvalidConfiguration",
    "NoProvidersAvailable",
    "ProviderError",
    "RequestTimeout",
    "ScoreResult",
    "Transaction",
    "aggregate",
    "apply_policies",
    "default_config",
    "resolve_action",
]
