"""
Models for recommendations
"""
from .recommendation import RecommendationResult, ScoredProduct

__all__ = ["RecommendationResult", "ScoredProduct"]
