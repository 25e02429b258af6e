"""
Tests for the recommendation engine: strategy dispatch, caching and fallbacks.
"""
import logging
import threading
from unittest.mock import AsyncMock

import pytest

from storefront_reco.core.config import Settings
from storefront_reco.services.recommendations import ProductCatalog, RecommendationEngine
from tests.conftest import ConstantRandom


def ids(products):
    return [product.id for product in products]


class TestStrategies:

    @pytest.mark.asyncio
    async def test_popular(self, engine):
        assert ids(await engine.get_recommendations("popular", limit=3)) == ["1", "2", "5"]

    @pytest.mark.asyncio
    async def test_similar(self, engine):
        result = await engine.get_recommendations("similar", product_id="1", limit=3)
        assert ids(result) == ["4", "5", "3"]

    @pytest.mark.asyncio
    async def test_similar_unknown_product_is_empty(self, engine):
        assert await engine.get_recommendations("similar", product_id="999") == []

    @pytest.mark.asyncio
    async def test_frequently_bought_together(self, engine):
        result = await engine.get_recommendations("frequently-bought-together", product_id="1")
        assert ids(result) == ["4", "3", "2"]

    @pytest.mark.asyncio
    async def test_trending(self, engine):
        result = await engine.get_recommendations("trending", limit=4)
        assert len(result) == 4
        assert len(set(ids(result))) == 4

    @pytest.mark.asyncio
    async def test_trending_without_variance(self, catalog):
        engine = RecommendationEngine(catalog, rng=ConstantRandom(0.0))
        assert ids(await engine.get_recommendations("trending")) == ["1", "2", "5"]

    @pytest.mark.asyncio
    async def test_recently_viewed(self, engine):
        for pid in ("5", "999", "2"):
            engine.track_product_view(pid, user_id=7)
        result = await engine.get_recommendations("recently-viewed", user_id=7, limit=3)
        assert ids(result) == ["2", "5"]

    @pytest.mark.asyncio
    async def test_recently_viewed_respects_limit(self, engine):
        for pid in ("1", "2", "3", "4"):
            engine.track_product_view(pid, user_id=7)
        result = await engine.get_recommendations("recently-viewed", user_id=7, limit=2)
        assert ids(result) == ["4", "3"]

    @pytest.mark.asyncio
    async def test_recently_viewed_anonymous(self, engine):
        engine.track_product_view("5")
        engine.track_product_view("2")
        assert ids(await engine.get_recommendations("recently-viewed")) == ["2", "5"]

    @pytest.mark.asyncio
    async def test_recently_viewed_user_without_views_sees_anonymous_views(self, engine):
        engine.track_product_view("5")
        engine.track_product_view("2")
        result = await engine.get_recommendations("recently-viewed", user_id=1)
        assert ids(result) == ["2", "5"]

    @pytest.mark.asyncio
    async def test_recently_viewed_prefers_own_views(self, engine):
        engine.track_product_view("5")
        engine.track_product_view("3", user_id=1)
        result = await engine.get_recommendations("recently-viewed", user_id=1)
        assert ids(result) == ["3"]

    @pytest.mark.asyncio
    async def test_personalized_from_purchases(self, engine):
        engine.record_purchase("1", user_id=2)
        result = await engine.get_recommendations("personalized", user_id=2)
        assert ids(result) == ["4", "5", "3"]

    @pytest.mark.asyncio
    async def test_personalized_without_history(self, catalog):
        engine = RecommendationEngine(catalog, rng=ConstantRandom(0.0))
        assert ids(await engine.get_recommendations("personalized", user_id=2)) == ["1", "2", "5"]


class TestFallbacks:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", ["similar", "frequently-bought-together"])
    async def test_missing_product_id_falls_back_to_popular(self, engine, strategy):
        assert ids(await engine.get_recommendations(strategy)) == ["1", "2", "5"]

    @pytest.mark.asyncio
    async def test_unknown_strategy_falls_back_to_popular(self, engine, caplog):
        with caplog.at_level(logging.WARNING):
            assert ids(await engine.get_recommendations("bestsellers")) == ["1", "2", "5"]
        assert "Unknown strategy 'bestsellers'" in caplog.text

    @pytest.mark.parametrize("strategy,product_id,expected", [
        ("similar", "1", "similar"),
        ("similar", None, "popular"),
        ("frequently-bought-together", "", "popular"),
        ("trending", None, "trending"),
        ("recently-viewed", None, "recently-viewed"),
        ("personalized", None, "personalized"),
        ("bestsellers", "1", "popular"),
    ])
    def test_resolve_algorithm(self, engine, strategy, product_id, expected):
        assert engine.resolve_algorithm(strategy, product_id) == expected

    @pytest.mark.asyncio
    async def test_unloaded_catalog_yields_empty(self):
        engine = RecommendationEngine(ProductCatalog())
        assert await engine.get_recommendations("popular") == []

    @pytest.mark.asyncio
    async def test_catalog_failure_is_logged_not_cached(self, engine, caplog):
        engine.catalog.get_all_products = AsyncMock(side_effect=RuntimeError("catalog down"))

        with caplog.at_level(logging.ERROR):
            result = await engine.get_recommendations("popular")

        assert result == []
        assert len(engine.cache) == 0
        assert "Error fetching recommendations" in caplog.text


class TestOutOfStockExclusion:

    @pytest.fixture
    def make_engine(self, products):
        def build(*out_of_stock):
            stocked = [p.model_copy(update={"in_stock": p.id not in out_of_stock}) for p in products]
            return RecommendationEngine(ProductCatalog(stocked), exclude_out_of_stock=True)
        return build

    @pytest.mark.asyncio
    async def test_popular_skips_out_of_stock(self, make_engine):
        engine = make_engine("1")
        assert ids(await engine.get_recommendations("popular")) == ["2", "5", "3"]

    @pytest.mark.asyncio
    async def test_out_of_stock_target_still_resolves(self, make_engine):
        engine = make_engine("1")
        assert ids(await engine.get_recommendations("similar", product_id="1")) == ["4", "5", "3"]
        result = await engine.get_recommendations("frequently-bought-together", product_id="1")
        assert ids(result) == ["4", "3", "2"]

    @pytest.mark.asyncio
    async def test_out_of_stock_candidate_is_skipped(self, make_engine):
        engine = make_engine("4")
        assert ids(await engine.get_recommendations("similar", product_id="1", limit=2)) == ["5", "3"]

    @pytest.mark.asyncio
    async def test_out_of_stock_purchase_still_scores(self, make_engine):
        engine = make_engine("1")
        engine.record_purchase("1", user_id=2)
        assert ids(await engine.get_recommendations("personalized", user_id=2)) == ["4", "5", "3"]

    @pytest.mark.asyncio
    async def test_recently_viewed_shows_out_of_stock_views(self, make_engine):
        engine = make_engine("1")
        engine.track_product_view("1", user_id=7)
        assert ids(await engine.get_recommendations("recently-viewed", user_id=7)) == ["1"]

    @pytest.mark.asyncio
    async def test_out_of_stock_included_by_default(self, products):
        stocked = [p.model_copy(update={"in_stock": False}) for p in products]
        engine = RecommendationEngine(ProductCatalog(stocked))
        assert ids(await engine.get_recommendations("popular")) == ["1", "2", "5"]


class TestCaching:

    @pytest.mark.asyncio
    async def test_repeat_request_is_served_from_cache(self, engine):
        first = await engine.get_recommendations("trending", limit=3)
        second = await engine.get_recommendations("trending", limit=3)
        assert second == first
        assert engine.cache.get_stats()["hits"] == 1

    @pytest.mark.asyncio
    async def test_mutating_a_result_leaves_cache_intact(self, engine):
        first = await engine.get_recommendations("popular")
        first.clear()
        assert ids(await engine.get_recommendations("popular")) == ["1", "2", "5"]

        second = await engine.get_recommendations("popular")
        second.append(second[0])
        assert ids(await engine.get_recommendations("popular")) == ["1", "2", "5"]

    @pytest.mark.asyncio
    async def test_cache_hit_skips_catalog(self, engine, products):
        engine.catalog.get_all_products = AsyncMock(return_value=products)
        await engine.get_recommendations("popular")
        await engine.get_recommendations("popular")
        assert engine.catalog.get_all_products.await_count == 1

    @pytest.mark.asyncio
    async def test_different_parameters_are_cached_separately(self, engine):
        three = await engine.get_recommendations("popular", limit=3)
        five = await engine.get_recommendations("popular", limit=5)
        assert len(three) == 3
        assert len(five) == 5
        assert len(engine.cache) == 2

    @pytest.mark.asyncio
    async def test_recomputed_after_ttl(self, engine, clock):
        await engine.get_recommendations("trending")
        clock.advance(300)
        await engine.get_recommendations("trending")
        stats = engine.cache.get_stats()
        assert stats["hits"] == 0
        assert stats["expirations"] == 1

    @pytest.mark.asyncio
    async def test_cached_until_ttl(self, engine, clock):
        first = await engine.get_recommendations("trending")
        clock.advance(299)
        assert await engine.get_recommendations("trending") == first
        assert engine.cache.get_stats()["hits"] == 1

    @pytest.mark.asyncio
    async def test_view_tracking_does_not_invalidate(self, engine):
        engine.track_product_view("1", user_id=3)
        await engine.get_recommendations("recently-viewed", user_id=3)
        engine.track_product_view("2", user_id=3)
        assert ids(await engine.get_recommendations("recently-viewed", user_id=3)) == ["1"]

    @pytest.mark.asyncio
    async def test_refresh_clears_cache(self, engine):
        await engine.get_recommendations("popular")
        await engine.refresh()
        assert len(engine.cache) == 0
        assert engine.catalog.is_loaded

    @pytest.mark.asyncio
    async def test_refresh_reloads_off_the_event_loop(self, engine):
        loop_thread = threading.get_ident()
        reload_threads = []
        engine.catalog.reload = lambda: reload_threads.append(threading.get_ident())

        await engine.refresh()
        assert len(reload_threads) == 1
        assert reload_threads[0] != loop_thread

    def test_cache_key(self):
        assert RecommendationEngine.cache_key("popular", None, None, 3) == ("popular", None, None, 3)
        assert RecommendationEngine.cache_key("similar", "1", None, 3) == ("similar", "1", None, 3)

    @pytest.mark.asyncio
    async def test_users_never_share_cache_entries(self, engine):
        # these parameter pairs collide under any "-"-joined string key
        assert RecommendationEngine.cache_key("personalized", None, -5, 3) != \
            RecommendationEngine.cache_key("personalized", "-", 5, 3)

        engine.record_purchase("1", user_id=5)
        own = await engine.get_recommendations("personalized", product_id="-", user_id=5)
        other = await engine.get_recommendations("personalized", user_id=-5)
        assert ids(own) == ["4", "5", "3"]
        assert engine.cache.get_stats()["hits"] == 0
        assert len(engine.cache) == 2
        assert len(other) == 3


class TestEngineInfo:

    def test_tracking_helpers(self, engine):
        engine.track_product_view("3")
        engine.track_product_view("1")
        assert engine.get_recently_viewed_ids() == ["1", "3"]
        assert engine.get_recently_viewed_ids(user_id=1) == []

    def test_algorithm_info(self, engine):
        info = engine.get_algorithm_info()
        assert set(info) == {
            "similar", "popular", "trending",
            "frequently-bought-together", "recently-viewed", "personalized"
        }
        assert engine.get_algorithm_info("popular")["name"] == "popular"
        assert "error" in engine.get_algorithm_info("nope")

    def test_stats(self, engine):
        stats = engine.get_stats()
        assert stats["catalog"]["total_products"] == 6
        assert stats["cache"]["size"] == 0
        assert stats["default_strategy"] == "popular"

    @pytest.mark.asyncio
    async def test_from_settings(self):
        engine = RecommendationEngine.from_settings(
            Settings(ENABLE_CACHE_SWEEP=False, RECOMMENDATION_RANDOM_SEED=1, VIEW_HISTORY_LIMIT=2)
        )
        assert len(await engine.catalog.get_all_products()) == 6
        for pid in ("1", "2", "3"):
            engine.track_product_view(pid)
        assert engine.get_recently_viewed_ids() == ["3", "2"]
