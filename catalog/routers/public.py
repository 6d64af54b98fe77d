from fastapi import APIRouter, Depends
from catalog.schemas.api_schemas import (
    EntityResponse,
    FilterDescriptor,
    MarketplaceSearch,
    MarketplaceSearchResponse,
)
from catalog.dependencies import get_entity_registry, get_filter_engine
from catalog.application.registry_service import EntityRegistry
from catalog.application.filter_service import FilterEngine
from typing import List

router = APIRouter()

@router.get("/public/entities", response_model=List[EntityResponse])
def get_public_entities(registry: EntityRegistry = Depends(get_entity_registry)):
    """
    Retrieve every entity for the marketplace. No authentication required.
    """
    return [EntityResponse.from_domain(e) for e in registry.list_all_entities()]

@router.post("/public/entities/search", response_model=MarketplaceSearchResponse)
def search_public_entities(
    search: MarketplaceSearch,
    registry: EntityRegistry = Depends(get_entity_registry),
    engine: FilterEngine = Depends(get_filter_engine)
):
    """
    Filter marketplace entities by type and attribute values.

    Also returns the filter widgets for the selected type, built from the
    values observed on its entities.
    """
    entities = registry.list_all_entities()
    matches = engine.apply(entities, search.filters, type_id=search.type_id)
    domains = engine.attribute_domains(entities, type_id=search.type_id)

    return MarketplaceSearchResponse(
        entities=[EntityResponse.from_domain(e) for e in matches],
        filters=[
            FilterDescriptor(name=d.name, type=d.type, values=d.values, widget=d.widget)
            for d in domains.values()
        ],
    )
