from .client import AGGREGATOR_ID, HttpxAggregatorClient, normalize_response
from .probe import probe_source

__all__ = [
    "AGGREGATOR_ID",
    "HttpxAggregatorClient",
    "normalize_response",
    "probe_source",
]
