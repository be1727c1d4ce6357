"""Tests for catalog/importer/reference_cache.py"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from catalog.importer.reference_cache import ReferenceCache
from catalog.models import EntityKind


@pytest.fixture
def cache(memory_store):
    cache = ReferenceCache(memory_store, category_colors={"Solaire": "#7fb727"}, default_color="#283084")
    cache.preload()
    return cache


class TestResolve:
    def test_creates_once(self, cache, memory_store):
        first = cache.category("Solaire")
        second = cache.category("Solaire")
        assert first == second
        assert len(memory_store.list_entities(EntityKind.CATEGORY)) == 1
        assert cache.created[EntityKind.CATEGORY] == 1

    def test_category_colors(self, cache, memory_store):
        cache.category("Solaire")
        cache.category("Intégration")
        colors = {e.name: e.color for e in memory_store.list_entities(EntityKind.CATEGORY)}
        assert colors == {"Solaire": "#7fb727", "Intégration": "#283084"}

    def test_slug_generated(self, cache, memory_store):
        cache.category("Pompes à chaleur")
        entity = memory_store.list_entities(EntityKind.CATEGORY)[0]
        assert entity.slug == "pompes-a-chaleur"

    def test_brands_have_no_color(self, cache, memory_store):
        cache.brand("Huawei")
        assert memory_store.list_entities(EntityKind.BRAND)[0].color is None

    def test_kinds_are_separate(self, cache):
        assert cache.brand("AP Systems") != cache.supplier("AP Systems")
        assert cache.created[EntityKind.BRAND] == 1
        assert cache.created[EntityKind.SUPPLIER] == 1


class TestPreload:
    def test_existing_entities_reused(self, memory_store):
        existing = memory_store.find_or_create_entity(EntityKind.BRAND, "Huawei", "huawei")
        cache = ReferenceCache(memory_store)
        cache.preload()
        assert cache.brand("Huawei") == existing.id
        assert cache.created[EntityKind.BRAND] == 0

    def test_separate_runs_share_store(self, memory_store):
        first = ReferenceCache(memory_store)
        first.preload()
        brand_id = first.brand("Keba")

        second = ReferenceCache(memory_store)
        second.preload()
        assert second.brand("Keba") == brand_id
        assert len(memory_store.list_entities(EntityKind.BRAND)) == 1


class TestConcurrency:
    def test_concurrent_resolution_creates_one_entity(self, cache, memory_store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = set(pool.map(lambda _: cache.supplier("Madep"), range(50)))
        assert len(ids) == 1
        assert len(memory_store.list_entities(EntityKind.SUPPLIER)) == 1
