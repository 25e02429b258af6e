"""
Recommendations router - storefront recommendation widgets and tracking
"""
from enum import Enum
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel

from storefront_reco.core.config import settings
from storefront_reco.core.dependencies import get_engine
from storefront_reco.services import recommendations_service
from storefront_reco.services.recommendations import RecommendationEngine
from storefront_reco.services.utils import constants

router = APIRouter()


class Strategy(str, Enum):
    similar = constants.STRATEGY_SIMILAR
    popular = constants.STRATEGY_POPULAR
    trending = constants.STRATEGY_TRENDING
    frequently_bought_together = constants.STRATEGY_FREQUENTLY_BOUGHT_TOGETHER
    recently_viewed = constants.STRATEGY_RECENTLY_VIEWED
    personalized = constants.STRATEGY_PERSONALIZED


class ProductEvent(BaseModel):
    product_id: str
    user_id: Optional[int] = None


@router.post("/views")
async def track_product_view(
    event: ProductEvent = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Track a product view

    The product moves to the front of the viewer's recently viewed list.
    """
    return recommendations_service.track_view(engine, event.product_id, event.user_id)


@router.get("/views")
async def get_recently_viewed_ids(
    user_id: Optional[int] = Query(None, description="Viewer (anonymous if omitted)"),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get tracked product IDs, most recent first"""
    return {
        "user_id": user_id,
        "product_ids": engine.get_recently_viewed_ids(user_id)
    }


@router.post("/purchases")
async def record_purchase(
    event: ProductEvent = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Record a purchased product (feeds the personalized strategy)"""
    return recommendations_service.record_purchase(engine, event.product_id, event.user_id)


@router.get("/algorithms")
async def list_algorithms(
    algorithm: Optional[str] = Query(None, description="Get info for specific algorithm"),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get information about available recommendation strategies"""
    return engine.get_algorithm_info(algorithm)


@router.get("/stats")
async def get_recommendation_stats(engine: RecommendationEngine = Depends(get_engine)):
    """
    Get recommendation engine statistics

    Returns cache performance (hit rate, size) and catalog status.
    """
    return engine.get_stats()


@router.post("/refresh")
async def refresh_recommendations(engine: RecommendationEngine = Depends(get_engine)):
    """
    Clear cached recommendations and reload the catalog

    Use this after catalog updates.
    """
    return await recommendations_service.refresh_recommendations(engine)


@router.get("/{strategy}")
async def get_recommendations(
    strategy: Strategy,
    product_id: Optional[str] = Query(None, description="Product in context (similar, frequently-bought-together)"),
    user_id: Optional[int] = Query(None, description="User in context (recently-viewed, personalized)"),
    limit: int = Query(
        settings.RECOMMENDATION_DEFAULT_LIMIT,
        ge=1,
        le=settings.RECOMMENDATION_MAX_LIMIT,
        description="Number of products"
    ),
    ids_only: bool = Query(False, description="Return only product IDs (simple array)"),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Get product recommendations

    Strategies:
    - similar: Content-based similarity to product_id
    - popular: Highest rating x reviews
    - trending: Popularity with random variance
    - frequently-bought-together: Cross-sell for product_id
    - recently-viewed: user_id's view history
    - personalized: Similar to user_id's views and purchases

    similar and frequently-bought-together fall back to popular without a
    product_id; without a user_id, history strategies use anonymous views.
    An empty list means there is nothing to show.
    """
    return await recommendations_service.get_recommendations(
        engine,
        strategy=strategy.value,
        product_id=product_id,
        user_id=user_id,
        limit=limit,
        ids_only=ids_only
    )
