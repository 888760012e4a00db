"""Scoring provider variants selected at composition time."""

from .base import ScoringProvider
from .heuristic import HeuristicProvider
from .local_model import LocalModelProvider
from .remote import RemoteEndpointProvider

__all__ = [
    "HeuristicProvider",
    "LocalModelProvider",
    "RemoteEndpointProvider",
    "ScoringProvider",
]
