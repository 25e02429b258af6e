"""
Content-based filtering
Ranks catalog products by weighted attribute similarity to a target product
"""
from typing import List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm, rank_products
from storefront_reco.services.recommendations.models import ScoredProduct
from storefront_reco.services.recommendations.similarity import calculate_product_similarity


def find_similar_products(
    target_product: Product,
    all_products: List[Product],
    limit: int = 3
) -> List[Product]:
    """
    Find the products most similar to `target_product`

    The target itself is never returned.
    """
    scored = [
        ScoredProduct(product, calculate_product_similarity(target_product, product))
        for product in all_products
        if product.id != target_product.id
    ]
    return rank_products(scored, limit)


class SimilarProductsAlgorithm(RecommendationAlgorithm):
    """
    Similar products for a product detail page

    Uses calculate_product_similarity (tags, price, name, description).
    """

    def __init__(self):
        super().__init__(name="similar")

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        target = next((p for p in catalog if p.id == product_id), None)
        if target is None:
            return []
        return find_similar_products(target, catalog, limit)
