"""
Frequently bought together
Deterministic placeholder for collaborative filtering; no behaviour data is consulted
"""
from typing import List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm, rank_products
from storefront_reco.services.recommendations.models import ScoredProduct
from storefront_reco.services.utils.constants import COLLABORATIVE_MODULUS
from storefront_reco.services.utils.parsers import id_seed


def pair_score(product_id: str, candidate_id: str) -> float:
    """Pseudo co-purchase score in [0, 1), stable for a given id pair"""
    seed = id_seed(product_id)
    return ((seed * 19 + id_seed(candidate_id) * 17) % COLLABORATIVE_MODULUS) / COLLABORATIVE_MODULUS


def collaborative_filtering_recommendations(
    product_id: str,
    all_products: List[Product],
    limit: int = 3
) -> List[Product]:
    """
    Products "frequently bought together" with `product_id`

    Returns an empty list when the product is not in the catalog.
    """
    if not any(product.id == product_id for product in all_products):
        return []

    scored = [
        ScoredProduct(product, pair_score(product_id, product.id))
        for product in all_products
        if product.id != product_id
    ]
    return rank_products(scored, limit)


class FrequentlyBoughtTogetherAlgorithm(RecommendationAlgorithm):
    """
    Cross-sell suggestions for a product

    Stand-in until order history is available to mine real co-purchases.
    """

    def __init__(self):
        super().__init__(name="frequently-bought-together")

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        if product_id is None:
            return []
        return collaborative_filtering_recommendations(product_id, catalog, limit)

    def get_info(self) -> dict:
        info = super().get_info()
        info.update({"deterministic": True, "placeholder": True})
        return info
