"""
Application configuration
Reads settings from environment variables
"""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    APP_NAME: str = "Storefront Recommendation Service"
    DEBUG: bool = False
    PORT: int = 8080
    
    # Catalog
    CATALOG_FILE_PATH: Optional[str] = None  # None -> bundled static/products.csv
    
    # Recommendations
    RECOMMENDATION_CACHE_TTL: int = 300  # 5 minutes
    RECOMMENDATION_CACHE_MAX_SIZE: int = 1000
    RECOMMENDATION_CACHE_SWEEP_INTERVAL: int = 60
    ENABLE_CACHE_SWEEP: bool = True
    RECOMMENDATION_DEFAULT_LIMIT: int = 3
    RECOMMENDATION_MAX_LIMIT: int = 50
    RECOMMENDATION_RANDOM_SEED: Optional[int] = None
    RECOMMENDATION_EXCLUDE_OUT_OF_STOCK: bool = False
    
    # View history
    VIEW_HISTORY_LIMIT: int = 10
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
