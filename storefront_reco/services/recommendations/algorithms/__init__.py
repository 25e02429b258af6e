"""
Recommendation algorithms
"""
from .content import SimilarProductsAlgorithm, find_similar_products
from .popularity import PopularityRecommendationAlgorithm, get_popular_products
from .trending import TrendingRecommendationAlgorithm, get_trending_product_recommendations
from .collaborative import FrequentlyBoughtTogetherAlgorithm, collaborative_filtering_recommendations
from .recently_viewed import RecentlyViewedAlgorithm, resolve_products
from .personalized import PersonalizedRecommendationAlgorithm, get_personalized_recommendations

__all__ = [
    "SimilarProductsAlgorithm",
    "PopularityRecommendationAlgorithm",
    "TrendingRecommendationAlgorithm",
    "FrequentlyBoughtTogetherAlgorithm",
    "RecentlyViewedAlgorithm",
    "PersonalizedRecommendationAlgorithm",
    "find_similar_products",
    "get_popular_products",
    "get_trending_product_recommendations",
    "collaborative_filtering_recommendations",
    "resolve_products",
    "get_personalized_recommendations"
]
