"""
Popularity-based recommendation algorithm
Simple but effective baseline
"""
from typing import List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm, rank_products
from storefront_reco.services.recommendations.models import ScoredProduct


def get_popular_products(all_products: List[Product], limit: int = 3) -> List[Product]:
    """Top products by rating * reviews"""
    return rank_products(
        (ScoredProduct(product, product.popularity_score) for product in all_products),
        limit
    )


class PopularityRecommendationAlgorithm(RecommendationAlgorithm):
    """
    Popularity-based recommendations

    Recommends the best rated products weighted by review count.
    Not personalized; also the engine's default strategy.
    """

    def __init__(self):
        super().__init__(name="popular")

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        return get_popular_products(catalog, limit)
