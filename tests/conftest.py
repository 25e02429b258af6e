"""
Pytest configuration and fixtures for the recommendation service tests.
"""
import numpy as np
import pytest

from storefront_reco.models.product import Product
from storefront_reco.services.recommendations import (
    InMemoryKeyValueStore,
    ProductCatalog,
    RecommendationCache,
    RecommendationEngine
)


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class ConstantRandom:
    """Stands in for numpy.random.Generator; random() always returns `value`."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def random(self) -> float:
        return self.value


def make_product(product_id: str, **overrides) -> Product:
    """Build a product with neutral defaults."""
    data = {
        "id": product_id,
        "name": f"Product {product_id}",
        "price": 10.0,
        "rating": 4.0,
        "reviews": 10,
        "description": "",
        "tags": [],
    }
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def catalog():
    """The bundled six-product storefront catalog."""
    product_catalog = ProductCatalog()
    product_catalog.load_default()
    return product_catalog


@pytest.fixture
def products(catalog):
    """Catalog products in file order."""
    return [catalog.get_product(str(i)) for i in range(1, 7)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def engine(catalog, clock, store):
    """Engine over the default catalog with a fake clock and seeded randomness."""
    return RecommendationEngine(
        catalog=catalog,
        store=store,
        cache=RecommendationCache(max_size=100, default_ttl=300, clock=clock),
        rng=np.random.default_rng(42)
    )
