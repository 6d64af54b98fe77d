from fastapi import APIRouter, Depends
from catalog.schemas.api_schemas import EntityTypeCreate, EntityTypeResponse
from catalog.dependencies import get_entity_type_registry, get_current_user_id
from catalog.application.registry_service import EntityTypeRegistry
from typing import List

router = APIRouter()

@router.post("/entity-types", response_model=EntityTypeResponse, status_code=201)
def create_entity_type(
    entity_type_data: EntityTypeCreate,
    user_id: str = Depends(get_current_user_id),
    registry: EntityTypeRegistry = Depends(get_entity_type_registry)
):
    """
    Register a new entity type. The id must not be in use.
    """
    entity_type = registry.create_entity_type(
        type_id=entity_type_data.id,
        name=entity_type_data.name,
        description=entity_type_data.description,
        predefined_attributes=[attr.to_domain() for attr in entity_type_data.predefined_attributes],
    )
    return EntityTypeResponse.from_domain(entity_type)

@router.get("/entity-types", response_model=List[EntityTypeResponse])
def get_all_entity_types(registry: EntityTypeRegistry = Depends(get_entity_type_registry)):
    """
    Retrieve all registered entity types.
    """
    return [EntityTypeResponse.from_domain(t) for t in registry.list_entity_types()]

@router.get("/entity-types/{type_id}", response_model=EntityTypeResponse)
def get_entity_type(
    type_id: str,
    registry: EntityTypeRegistry = Depends(get_entity_type_registry)
):
    """
    Get a specific entity type by ID.
    """
    return EntityTypeResponse.from_domain(registry.get_entity_type(type_id))
