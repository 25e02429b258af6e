"""
Data models for recommendations
"""
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront_reco.models.product import Product


@dataclass
class ScoredProduct:
    """Product paired with the score it was ranked by"""
    product: Product
    score: float


@dataclass
class RecommendationResult:
    """Result of a single recommendation request"""
    strategy: str
    products: List[Product]
    limit: int
    product_id: Optional[str] = None
    user_id: Optional[int] = None
    execution_time_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def product_ids(self) -> List[str]:
        return [product.id for product in self.products]
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "strategy": self.strategy,
            "product_id": self.product_id,
            "user_id": self.user_id,
            "limit": self.limit,
            "products": [product.model_dump(by_alias=True) for product in self.products],
            "count": len(self.products),
            "execution_time_ms": round(self.execution_time_ms, 2),
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata
        }
