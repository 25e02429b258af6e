"""
Trending products
Popularity with a random boost so that the ranking rotates between requests
"""
from typing import List, Optional

import numpy as np

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm, rank_products
from storefront_reco.services.recommendations.models import ScoredProduct
from storefront_reco.services.utils.constants import TRENDING_VARIANCE


def get_trending_product_recommendations(
    all_products: List[Product],
    limit: int = 3,
    rng: Optional[np.random.Generator] = None
) -> List[Product]:
    """
    Trending products: rating * reviews * (1 + U[0, 0.3))

    Non-deterministic unless a seeded `rng` is supplied.
    """
    if rng is None:
        rng = np.random.default_rng()

    scored = []
    for product in all_products:
        variance = float(rng.random()) * TRENDING_VARIANCE
        scored.append(ScoredProduct(product, product.popularity_score * (1 + variance)))
    return rank_products(scored, limit)


class TrendingRecommendationAlgorithm(RecommendationAlgorithm):
    """
    Trending recommendations

    The random variance lets lower ranked products surface for discovery.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        super().__init__(name="trending")
        self.rng = rng if rng is not None else np.random.default_rng()

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        return get_trending_product_recommendations(catalog, limit, rng=self.rng)

    def get_info(self) -> dict:
        info = super().get_info()
        info.update({"variance": TRENDING_VARIANCE})
        return info
