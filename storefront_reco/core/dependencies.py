"""
FastAPI dependencies
"""
from fastapi import Request

from storefront_reco.services.recommendations import RecommendationEngine


def get_engine(request: Request) -> RecommendationEngine:
    """
    Dependency for getting the application's recommendation engine
    Usage: engine: RecommendationEngine = Depends(get_engine)
    """
    return request.app.state.engine
