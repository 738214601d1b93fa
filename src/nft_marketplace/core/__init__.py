"""Shared controller plumbing: errors, envelope, filters, metrics, fan-out."""
from nft_marketplace.core.enrichment import gather_enriched, nft_preview
from nft_marketplace.core.error_mapper import HANDLED_EXCEPTIONS, ErrorMapper
from nft_marketplace.core.exceptions import (ConflictError, MarketplaceError,
                                             NotFoundError,
                                             StoreUnavailableError,
                                             ValidationFailedError)
from nft_marketplace.core.filters import (build_pipeline, paginate,
                                          parse_filters, without_pagination)
from nft_marketplace.core.metrics import (NO_FLOOR_PRICE, CollectionStats,
                                          TradeWindow,
                                          compute_24h_values,
                                          compute_collection_stats,
                                          distinct_owners, trade_points)
from nft_marketplace.core.respond import as_json_response, respond

__all__ = [
    "HANDLED_EXCEPTIONS",
    "NO_FLOOR_PRICE",
    "CollectionStats",
    "ConflictError",
    "ErrorMapper",
    "MarketplaceError",
    "NotFoundError",
    "StoreUnavailableError",
    "TradeWindow",
    "ValidationFailedError",
    "as_json_response",
    "build_pipeline",
    "compute_24h_values",
    "compute_collection_stats",
    "distinct_owners",
    "gather_enriched",
    "nft_preview",
    "paginate",
    "parse_filters",
    "respond",
    "trade_points",
    "without_pagination",
]
