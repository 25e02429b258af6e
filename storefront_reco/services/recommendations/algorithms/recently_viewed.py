"""
Recently viewed products
"""
from typing import List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm
from storefront_reco.services.recommendations.history import ViewHistoryTracker


def resolve_products(product_ids: List[str], all_products: List[Product]) -> List[Product]:
    """Map ids to catalog products keeping id order; unknown ids are dropped"""
    by_id = {product.id: product for product in all_products}
    return [by_id[pid] for pid in product_ids if pid in by_id]


class RecentlyViewedAlgorithm(RecommendationAlgorithm):
    """
    Products from the user's view history, most recent first

    Without a user_id the anonymous slot is read. A user with no views
    of their own sees the anonymous slot too (views tracked before the
    user id was known).
    """

    def __init__(self, view_history: ViewHistoryTracker):
        super().__init__(name="recently-viewed")
        self.view_history = view_history

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        viewed_ids = self.view_history.get(user_id)
        if not viewed_ids and user_id is not None:
            viewed_ids = self.view_history.get()
        viewed = resolve_products(viewed_ids, catalog)
        return viewed[:max(limit, 0)]
