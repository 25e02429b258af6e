"""
Recommendations module
Provides product recommendation strategies with caching and view tracking
"""
from .engine import RecommendationEngine
from .models import RecommendationResult, ScoredProduct
from .catalog import ProductCatalog, CatalogLoadError
from .cache import RecommendationCache
from .history import (
    InMemoryKeyValueStore,
    KeyValueStore,
    PurchaseHistoryTracker,
    ViewHistoryTracker
)
from .similarity import (
    calculate_product_similarity,
    cosine_similarity,
    jaccard_similarity
)

__all__ = [
    "RecommendationEngine",
    "RecommendationResult",
    "ScoredProduct",
    "ProductCatalog",
    "CatalogLoadError",
    "RecommendationCache",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PurchaseHistoryTracker",
    "ViewHistoryTracker",
    "calculate_product_similarity",
    "cosine_similarity",
    "jaccard_similarity"
]
