"""
Base classes and interfaces for recommendation algorithms
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations.models import ScoredProduct


def rank_products(scored: Iterable[ScoredProduct], limit: int) -> List[Product]:
    """
    Sort by score descending and keep the top `limit` products

    The sort is stable, so equal scores keep catalog order.
    """
    ranked = sorted(scored, key=lambda item: item.score, reverse=True)
    return [item.product for item in ranked[:max(limit, 0)]]


class RecommendationAlgorithm(ABC):
    """
    Abstract base class for recommendation strategies

    Every strategy the engine dispatches to inherits from this class
    and implements the recommend method.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def recommend(
        self,
        catalog: List[Product],
        limit: int = 3,
        product_id: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> List[Product]:
        """
        Generate recommendations from a catalog snapshot

        Args:
            catalog: Full product catalog
            limit: Maximum number of products to return
            product_id: Product in context (detail page, cart item)
            user_id: User in context

        Returns:
            At most `limit` products, best first
        """
        pass

    def get_info(self) -> dict:
        """Get information about the algorithm"""
        return {
            "name": self.name,
            "type": self.__class__.__name__
        }
