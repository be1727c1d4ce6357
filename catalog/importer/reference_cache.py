"""
Reference Cache

Per-run lookup of category, brand and supplier ids by name.

The cache is pre-seeded from the store, then extended with find-or-create as
new names show up. One lock covers check-and-create so that two workers
seeing the same new brand at once resolve to a single entity.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ..common.constants import DEFAULT_CATEGORY_COLOR
from ..common.slugs import generate_slug
from ..models import EntityKind
from ..storage.base import CatalogStore

logger = logging.getLogger(__name__)


class ReferenceCache:
    """
    Name -> id cache for reference entities, scoped to one import run.

    Usage:
        cache = ReferenceCache(store, category_colors={'Solaire': '#7fb727'})
        cache.preload()
        category_id = cache.category("Solaire")
    """

    def __init__(
        self,
        store: CatalogStore,
        category_colors: Optional[Dict[str, str]] = None,
        default_color: str = DEFAULT_CATEGORY_COLOR,
    ):
        self.store = store
        self.category_colors = category_colors or {}
        self.default_color = default_color

        self._ids: Dict[EntityKind, Dict[str, str]] = {kind: {} for kind in EntityKind}
        self._lock = threading.Lock()
        self.created: Dict[EntityKind, int] = {kind: 0 for kind in EntityKind}

    def preload(self) -> None:
        """Seed the cache with every entity already persisted."""
        with self._lock:
            for kind in EntityKind:
                for entity in self.store.list_entities(kind):
                    self._ids[kind][entity.name] = entity.id
        logger.debug(
            "Preloaded %d categories, %d brands, %d suppliers",
            *(len(self._ids[kind]) for kind in EntityKind),
        )

    def resolve(self, kind: EntityKind, name: str) -> str:
        """
        Return the id of the entity named `name`, creating it on first sight.

        Args:
            kind: Entity family
            name: Exact entity name

        Returns:
            Entity id
        """
        with self._lock:
            cached = self._ids[kind].get(name)
            if cached is not None:
                return cached

            color = None
            if kind is EntityKind.CATEGORY:
                color = self.category_colors.get(name, self.default_color)

            entity = self.store.find_or_create_entity(kind, name, generate_slug(name), color)
            self._ids[kind][name] = entity.id
            self.created[kind] += 1
            logger.info("New %s: %s", kind.value, name)
            return entity.id

    def category(self, name: str) -> str:
        return self.resolve(EntityKind.CATEGORY, name)

    def brand(self, name: str) -> str:
        return self.resolve(EntityKind.BRAND, name)

    def supplier(self, name: str) -> str:
        return self.resolve(EntityKind.SUPPLIER, name)
