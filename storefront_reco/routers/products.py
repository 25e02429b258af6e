"""
Products router - catalog browsing
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront_reco.core.dependencies import get_engine
from storefront_reco.models.product import Product
from storefront_reco.services import recommendations_service
from storefront_reco.services.recommendations import RecommendationEngine

router = APIRouter()


@router.get("/", response_model=List[Product])
async def get_products(engine: RecommendationEngine = Depends(get_engine)):
    """Get the full product catalog"""
    return await recommendations_service.list_products(engine)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    user_id: Optional[int] = Query(None, description="Viewer, for view history"),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Get a product detail page

    Every successful lookup is tracked as a product view.
    """
    product = recommendations_service.view_product(engine, product_id, user_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    return product
