"""
Shared constants for services
"""

# Recommendation strategies
STRATEGY_SIMILAR = "similar"
STRATEGY_POPULAR = "popular"
STRATEGY_TRENDING = "trending"
STRATEGY_FREQUENTLY_BOUGHT_TOGETHER = "frequently-bought-together"
STRATEGY_RECENTLY_VIEWED = "recently-viewed"
STRATEGY_PERSONALIZED = "personalized"

ALL_STRATEGIES = (
    STRATEGY_SIMILAR,
    STRATEGY_POPULAR,
    STRATEGY_TRENDING,
    STRATEGY_FREQUENTLY_BOUGHT_TOGETHER,
    STRATEGY_RECENTLY_VIEWED,
    STRATEGY_PERSONALIZED,
)

DEFAULT_STRATEGY = STRATEGY_POPULAR

# Persisted history slots
VIEW_HISTORY_KEY = "recentlyViewedProducts"
PURCHASE_HISTORY_KEY = "purchasedProducts"

# Content similarity feature weights (sum to 1.0)
SIMILARITY_WEIGHTS = {
    "tags": 0.5,
    "price": 0.3,
    "name": 0.1,
    "description": 0.1,
}

# Trending variance upper bound (score * (1 + U[0, 0.3)))
TRENDING_VARIANCE = 0.3

# Collaborative placeholder modulus
COLLABORATIVE_MODULUS = 97

# Personalized scoring
PURCHASE_WEIGHT = 2.0
