"""NerdGraph connector (network + config lives here; payload adapters live in src/backend/adapters/nerdgraph)."""

from .client import NerdGraphHttpError, NerdGraphQueryError, nerdgraph_query
from .config import NerdGraphConfig, get_nerdgraph_config

__all__ = [
    "NerdGraphConfig",
    "NerdGraphHttpError",
    "NerdGraphQueryError",
    "get_nerdgraph_config",
    "nerdgraph_query",
]
