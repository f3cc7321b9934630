"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. With an upstream API URL
configured the HTTP adapters are used; otherwise everything is read from
and written to JSON files under the data directory. Conversion history is
always kept locally.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from stockflow.domain.repository.conversion_repository import ConversionRepository
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.domain.repository.location_directory import LocationDirectory
from stockflow.domain.repository.recipe_catalog import RecipeCatalog
from stockflow.domain.repository.variance_reason_repository import (
    VarianceReasonRepository,
)
from stockflow.domain.service.conversion_workflow import ConversionWorkflow
from stockflow.domain.service.keyed_lock import KeyedLock
from stockflow.domain.service.provisioning_service import ProvisioningService
from stockflow.domain.service.recipe_service import RecipeService
from stockflow.infrastructure.config import Settings
from stockflow.infrastructure.http.client import UpstreamClient
from stockflow.infrastructure.http.inventory_store import HttpInventoryStore
from stockflow.infrastructure.http.location_directory import HttpLocationDirectory
from stockflow.infrastructure.http.recipe_catalog import HttpRecipeCatalog
from stockflow.infrastructure.http.variance_reasons import (
    HttpVarianceReasonRepository,
)
from stockflow.infrastructure.messaging.event_bus import InMemoryEventBus
from stockflow.infrastructure.persistence.json_catalogs import (
    JsonLocationDirectory,
    JsonRecipeCatalog,
    JsonVarianceReasonRepository,
)
from stockflow.infrastructure.persistence.json_conversion_repository import (
    JsonConversionRepository,
)
from stockflow.infrastructure.persistence.json_inventory_store import JsonInventoryStore


@dataclass(frozen=True)
class Adapters:
    locations: LocationDirectory
    inventory: InventoryStore
    recipes: RecipeCatalog
    variance_reasons: VarianceReasonRepository
    conversions: ConversionRepository


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def stock_locks() -> KeyedLock:
    return KeyedLock()


@lru_cache(maxsize=1)
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


def build_adapters(config: Settings) -> Adapters:
    conversions = JsonConversionRepository(config.data_dir / "conversions.json")

    if config.uses_upstream:
        client = UpstreamClient(
            config.api_url,
            consumer_key=config.consumer_key,
            consumer_secret=config.consumer_secret,
            timeout=config.timeout,
        )
        return Adapters(
            locations=HttpLocationDirectory(client),
            inventory=HttpInventoryStore(client),
            recipes=HttpRecipeCatalog(client),
            variance_reasons=HttpVarianceReasonRepository(client),
            conversions=conversions,
        )

    return Adapters(
        locations=JsonLocationDirectory(config.data_dir / "locations.json"),
        inventory=JsonInventoryStore(config.data_dir / "inventory.json"),
        recipes=JsonRecipeCatalog(config.data_dir / "recipes.json"),
        variance_reasons=JsonVarianceReasonRepository(config.data_dir / "variance_reasons.json"),
        conversions=conversions,
    )


@lru_cache(maxsize=1)
def adapters() -> Adapters:
    return build_adapters(settings())


def provisioning_service() -> ProvisioningService:
    a = adapters()
    return ProvisioningService(
        a.locations,
        a.inventory,
        publisher=event_bus(),
        max_workers=settings().max_workers,
    )


def conversion_workflow() -> ConversionWorkflow:
    a = adapters()
    return ConversionWorkflow(
        a.inventory,
        a.recipes,
        a.conversions,
        publisher=event_bus(),
        variance_reasons=a.variance_reasons,
        locks=stock_locks(),
    )


def recipe_service() -> RecipeService:
    return RecipeService(adapters().recipes)
