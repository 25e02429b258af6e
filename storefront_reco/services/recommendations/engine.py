"""
Main recommendation engine
Coordinates strategies, caching and view tracking
"""
import asyncio
import logging
import time
from typing import Dict, List, Optional, Tuple

import numpy as np

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm
from storefront_reco.services.recommendations.cache import RecommendationCache
from storefront_reco.services.recommendations.catalog import ProductCatalog
from storefront_reco.services.recommendations.history import (
    InMemoryKeyValueStore,
    KeyValueStore,
    PurchaseHistoryTracker,
    ViewHistoryTracker
)
from storefront_reco.services.recommendations.algorithms import (
    FrequentlyBoughtTogetherAlgorithm,
    PersonalizedRecommendationAlgorithm,
    PopularityRecommendationAlgorithm,
    RecentlyViewedAlgorithm,
    SimilarProductsAlgorithm,
    TrendingRecommendationAlgorithm
)
from storefront_reco.services.utils.constants import (
    ALL_STRATEGIES,
    DEFAULT_STRATEGY,
    STRATEGY_FREQUENTLY_BOUGHT_TOGETHER,
    STRATEGY_POPULAR,
    STRATEGY_RECENTLY_VIEWED,
    STRATEGY_SIMILAR
)

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Optional[str], Optional[int], int]


class RecommendationEngine:
    """
    Main recommendation engine

    Owns the strategy registry, the result cache and the view/purchase
    history trackers, and provides a unified interface for recommendations.
    Construct one per application (or per test); nothing here is global.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        store: Optional[KeyValueStore] = None,
        cache: Optional[RecommendationCache] = None,
        cache_ttl: float = 300,
        cache_max_size: int = 1000,
        view_history_limit: int = 10,
        rng: Optional[np.random.Generator] = None,
        exclude_out_of_stock: bool = False
    ):
        """
        Initialize recommendation engine

        Args:
            catalog: Product catalog provider
            store: Key-value store holding view and purchase histories
            cache: Result cache (built from cache_ttl/cache_max_size if None)
            cache_ttl: Cache time-to-live in seconds
            cache_max_size: Maximum number of cached results
            view_history_limit: Number of recently viewed products kept
            rng: Random generator for the trending variance
            exclude_out_of_stock: Drop out-of-stock products before scoring
        """
        self.catalog = catalog
        self.store = store if store is not None else InMemoryKeyValueStore()
        self.cache = cache if cache is not None else RecommendationCache(
            max_size=cache_max_size,
            default_ttl=cache_ttl
        )
        self.exclude_out_of_stock = exclude_out_of_stock
        self.rng = rng if rng is not None else np.random.default_rng()

        self.view_history = ViewHistoryTracker(self.store, max_items=view_history_limit)
        self.purchase_history = PurchaseHistoryTracker(self.store)

        self.algorithms: Dict[str, RecommendationAlgorithm] = {}
        for algorithm in (
            SimilarProductsAlgorithm(),
            PopularityRecommendationAlgorithm(),
            TrendingRecommendationAlgorithm(rng=self.rng),
            FrequentlyBoughtTogetherAlgorithm(),
            RecentlyViewedAlgorithm(self.view_history),
            PersonalizedRecommendationAlgorithm(self.view_history, self.purchase_history, rng=self.rng)
        ):
            self.algorithms[algorithm.name] = algorithm

    @classmethod
    def from_settings(cls, settings, store: Optional[KeyValueStore] = None) -> "RecommendationEngine":
        """
        Build an engine with its catalog loaded, configured from Settings

        Raises:
            CatalogLoadError: if the configured catalog cannot be loaded
        """
        catalog = ProductCatalog()
        if settings.CATALOG_FILE_PATH:
            catalog.load_from_csv(settings.CATALOG_FILE_PATH)
        else:
            catalog.load_default()

        return cls(
            catalog=catalog,
            store=store,
            cache_ttl=settings.RECOMMENDATION_CACHE_TTL,
            cache_max_size=settings.RECOMMENDATION_CACHE_MAX_SIZE,
            view_history_limit=settings.VIEW_HISTORY_LIMIT,
            rng=np.random.default_rng(settings.RECOMMENDATION_RANDOM_SEED),
            exclude_out_of_stock=settings.RECOMMENDATION_EXCLUDE_OUT_OF_STOCK
        )

    @staticmethod
    def cache_key(
        strategy: str,
        product_id: Optional[str],
        user_id: Optional[int],
        limit: int
    ) -> CacheKey:
        """Composite key of all request parameters"""
        return (strategy, product_id, user_id, limit)

    async def get_recommendations(
        self,
        strategy: str = DEFAULT_STRATEGY,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: int = 3
    ) -> List[Product]:
        """
        Get recommended products

        Never raises: any failure is logged and yields an empty list,
        which callers render as "nothing to show".

        Args:
            strategy: similar, popular, trending, frequently-bought-together,
                recently-viewed or personalized
            product_id: Product in context (similar, frequently-bought-together)
            user_id: User in context (recently-viewed, personalized)
            limit: Maximum number of products

        Returns:
            Recommended products, best first. Each call gets its own list;
            the cache holds a tuple.
        """
        cache_key = self.cache_key(strategy, product_id, user_id, limit)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit key=%s", cache_key)
            return list(cached)

        start_time = time.perf_counter()
        try:
            algorithm_name = self.resolve_algorithm(strategy, product_id, user_id)
            products = await self.catalog.get_all_products()
            recommendations = await self._run_algorithm(
                algorithm_name, products, limit, product_id, user_id
            )
        except Exception:
            logger.exception(
                "Error fetching recommendations strategy=%s product_id=%s user_id=%s",
                strategy, product_id, user_id
            )
            return []

        logger.debug(
            "Computed %s recommendations key=%s algorithm=%s in %.2fms",
            len(recommendations), cache_key, algorithm_name,
            (time.perf_counter() - start_time) * 1000
        )
        self.cache.set(cache_key, tuple(recommendations))
        return recommendations

    async def _run_algorithm(
        self,
        algorithm_name: str,
        products: List[Product],
        limit: int,
        product_id: Optional[str],
        user_id: Optional[int]
    ) -> List[Product]:
        """
        Score the full catalog with one algorithm

        With out-of-stock exclusion on, the whole ranking is computed and
        out-of-stock candidates are dropped from it afterwards, so targets
        and history entries still resolve. Recently viewed lists are
        shown as viewed.
        """
        algorithm = self.algorithms[algorithm_name]
        filter_stock = self.exclude_out_of_stock and algorithm_name != STRATEGY_RECENTLY_VIEWED
        recommendations = await algorithm.recommend(
            products,
            limit=len(products) if filter_stock else limit,
            product_id=product_id,
            user_id=user_id
        )
        if filter_stock:
            recommendations = [p for p in recommendations if p.in_stock][:max(limit, 0)]
        return recommendations

    def resolve_algorithm(
        self,
        strategy: str,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> str:
        """
        Map a requested strategy to the algorithm that serves it

        similar and frequently-bought-together fall back to popular without
        a product_id, as do unknown strategies. recently-viewed and
        personalized read the anonymous history slot when user_id is None.
        """
        if strategy not in ALL_STRATEGIES:
            logger.warning("Unknown strategy '%s', serving %s", strategy, STRATEGY_POPULAR)
            return STRATEGY_POPULAR
        if strategy in (STRATEGY_SIMILAR, STRATEGY_FREQUENTLY_BOUGHT_TOGETHER) and not product_id:
            return STRATEGY_POPULAR
        return strategy

    def track_product_view(self, product_id: str, user_id: Optional[int] = None) -> None:
        """
        Record a product detail view

        The product moves to the front of the user's history, which keeps
        the latest `view_history_limit` products.
        """
        self.view_history.track(product_id, user_id)

    def get_recently_viewed_ids(self, user_id: Optional[int] = None) -> List[str]:
        """Tracked product ids, most recent first"""
        return self.view_history.get(user_id)

    def record_purchase(self, product_id: str, user_id: Optional[int] = None) -> None:
        """Record a purchased product for personalized recommendations"""
        self.purchase_history.record(product_id, user_id)

    async def refresh(self) -> None:
        """Reload the catalog from its source, then drop cached results"""
        logger.info("Refreshing recommendation engine...")
        # pandas read blocks; keep it off the event loop
        await asyncio.to_thread(self.catalog.reload)
        self.cache.clear()

    def get_algorithm_info(self, algorithm: Optional[str] = None) -> Dict:
        """
        Get information about algorithms

        Args:
            algorithm: Specific algorithm name (None for all)
        """
        if algorithm:
            algo = self.algorithms.get(algorithm)
            if algo:
                return algo.get_info()
            return {"error": f"Algorithm '{algorithm}' not found"}

        return {
            name: algo.get_info()
            for name, algo in self.algorithms.items()
        }

    def get_stats(self) -> Dict:
        """Get engine statistics"""
        return {
            "algorithms": list(self.algorithms.keys()),
            "default_strategy": DEFAULT_STRATEGY,
            "exclude_out_of_stock": self.exclude_out_of_stock,
            "catalog": self.catalog.get_stats(),
            "cache": self.cache.get_stats()
        }
