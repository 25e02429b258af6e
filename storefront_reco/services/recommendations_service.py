"""
Recommendations service - high-level business logic for recommendations
Wraps the recommendation engine for the HTTP layer
"""
import time
from typing import Any, Dict, List, Optional

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations import RecommendationEngine, RecommendationResult


async def get_recommendations(
    engine: RecommendationEngine,
    strategy: str,
    product_id: Optional[str] = None,
    user_id: Optional[int] = None,
    limit: int = 3,
    ids_only: bool = False
) -> Dict[str, Any] | List[str]:
    """
    Get recommendations for a storefront widget

    Args:
        engine: Recommendation engine
        strategy: Recommendation strategy
        product_id: Product in context
        user_id: User in context
        limit: Number of products
        ids_only: If True, return simple array of product IDs

    Returns:
        Full format (ids_only=false):
        {
            "strategy": "similar",
            "products": [{id, name, price, ...}],
            "count": 3,
            "execution_time_ms": 0.4,
            "metadata": {"algorithm": "similar", "fallback": false},
            ...
        }

        IDs only (ids_only=true):
        ["4", "5", "3"]
    """
    start_time = time.perf_counter()
    products = await engine.get_recommendations(
        strategy=strategy,
        product_id=product_id,
        user_id=user_id,
        limit=limit
    )

    if ids_only:
        return [product.id for product in products]

    algorithm = engine.resolve_algorithm(strategy, product_id, user_id)
    result = RecommendationResult(
        strategy=strategy,
        products=products,
        limit=limit,
        product_id=product_id,
        user_id=user_id,
        execution_time_ms=(time.perf_counter() - start_time) * 1000,
        metadata={
            "algorithm": algorithm,
            "fallback": algorithm != strategy
        }
    )
    return result.to_dict()


async def list_products(engine: RecommendationEngine) -> List[Product]:
    """Full catalog listing"""
    return await engine.catalog.get_all_products()


def view_product(
    engine: RecommendationEngine,
    product_id: str,
    user_id: Optional[int] = None
) -> Optional[Product]:
    """
    Product detail lookup; tracks the view when the product exists

    Returns:
        Product or None if not in the catalog
    """
    product = engine.catalog.get_product(product_id)
    if product is not None:
        engine.track_product_view(product_id, user_id)
    return product


def track_view(
    engine: RecommendationEngine,
    product_id: str,
    user_id: Optional[int] = None
) -> Dict[str, Any]:
    """Track a product view and return the resulting history"""
    engine.track_product_view(product_id, user_id)
    return {
        "user_id": user_id,
        "product_ids": engine.get_recently_viewed_ids(user_id)
    }


def record_purchase(
    engine: RecommendationEngine,
    product_id: str,
    user_id: Optional[int] = None
) -> Dict[str, Any]:
    """Record a purchase and return the resulting purchase history"""
    engine.record_purchase(product_id, user_id)
    return {
        "user_id": user_id,
        "product_ids": engine.purchase_history.get(user_id)
    }


async def refresh_recommendations(engine: RecommendationEngine) -> Dict[str, Any]:
    """
    Clear cached recommendations and reload the catalog

    Returns:
        Refresh status
    """
    try:
        await engine.refresh()
        return {
            "success": True,
            "message": "Recommendations refreshed successfully",
            "stats": engine.get_stats()
        }
    except Exception as e:
        return {
            "success": False,
            "message": f"Failed to refresh recommendations: {str(e)}"
        }
