"""
Personalized recommendations
Scores unseen products by similarity to what the user viewed and bought
"""
import logging
from typing import Dict, List, Optional

import numpy as np

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.base import RecommendationAlgorithm, rank_products
from storefront_reco.services.recommendations.history import PurchaseHistoryTracker, ViewHistoryTracker
from storefront_reco.services.recommendations.models import ScoredProduct
from storefront_reco.services.recommendations.similarity import calculate_product_similarity
from storefront_reco.services.recommendations.algorithms.trending import get_trending_product_recommendations
from storefront_reco.services.utils.constants import PURCHASE_WEIGHT

logger = logging.getLogger(__name__)


def get_personalized_recommendations(
    user_id: Optional[int],
    view_history: List[str],
    purchase_history: List[str],
    all_products: List[Product],
    limit: int = 3,
    rng: Optional[np.random.Generator] = None
) -> List[Product]:
    """
    Personalized products for a user

    - No history at all: trending products.
    - Each purchase adds 2 * similarity to every unseen product.
    - Each view adds similarity * (1 + (n - index) / n); `view_history`
      must be most-recent-first so the latest view weighs most.
    - Viewed and purchased products are never recommended; ids missing
      from the catalog are skipped.
    """
    if not view_history and not purchase_history:
        logger.debug("No history for user_id=%s, falling back to trending", user_id)
        return get_trending_product_recommendations(all_products, limit, rng=rng)

    by_id = {product.id: product for product in all_products}
    seen = set(view_history) | set(purchase_history)
    scores: Dict[str, float] = {
        product.id: 0.0 for product in all_products if product.id not in seen
    }
    candidates = [by_id[pid] for pid in scores]

    for bought_id in purchase_history:
        bought = by_id.get(bought_id)
        if bought is None:
            continue
        for candidate in candidates:
            scores[candidate.id] += calculate_product_similarity(bought, candidate) * PURCHASE_WEIGHT

    n_views = len(view_history)
    for index, viewed_id in enumerate(view_history):
        viewed = by_id.get(viewed_id)
        if viewed is None:
            continue
        recency_weight = 1 + (n_views - index) / n_views
        for candidate in candidates:
            scores[candidate.id] += calculate_product_similarity(viewed, candidate) * recency_weight

    return rank_products(
        (ScoredProduct(candidate, scores[candidate.id]) for candidate in candidates),
        limit
    )


class PersonalizedRecommendationAlgorithm(RecommendationAlgorithm):
    """
    Personalized recommendations from tracked views and recorded purchases

    Histories are looked up with the same user id the request carries.
    """

    def __init__(
        self,
        view_history: ViewHistoryTracker,
        purchase_history: PurchaseHistoryTracker,
        rng: Optional[np.random.Generator] = None
    ):
        super().__init__(name="personalized")
        self.view_history = view_history
        self.purchase_history = purchase_history
        self.rng = rng if rng is not None else np.random.default_rng()

    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        return get_personalized_recommendations(
            user_id,
            self.view_history.get(user_id),
            self.purchase_history.get(user_id),
            catalog,
            limit,
            rng=self.rng
        )
