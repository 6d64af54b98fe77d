from fastapi import APIRouter, Path, Depends
from catalog.schemas.api_schemas import (
    EntityCreate,
    EntityResponse,
    MissingInfoResponse,
    RequestInfoPayload,
    RequestInfoResponse,
    RequestStateResponse,
)
from catalog.dependencies import get_entity_registry, get_interaction_tracker, get_current_user_id
from catalog.application.registry_service import EntityRegistry
from catalog.application.interaction_service import InteractionTracker
from typing import List

router = APIRouter()

@router.post("/entities", response_model=EntityResponse, status_code=201)
def create_entity(
    entity_data: EntityCreate,
    user_id: str = Depends(get_current_user_id),
    registry: EntityRegistry = Depends(get_entity_registry)
):
    """
    Create an entity owned by the caller.
    """
    entity = registry.create_entity(
        owner_id=user_id,
        type_id=entity_data.type_id,
        name=entity_data.name,
        attributes=[attr.to_domain() for attr in entity_data.attributes],
        entity_id=entity_data.id,
    )
    return EntityResponse.from_domain(entity)

@router.get("/entities", response_model=List[EntityResponse])
def get_my_entities(
    user_id: str = Depends(get_current_user_id),
    registry: EntityRegistry = Depends(get_entity_registry)
):
    """
    Retrieve the entities owned by the caller.
    """
    return [EntityResponse.from_domain(e) for e in registry.list_owner_entities(user_id)]

@router.get("/entities/{entity_id}", response_model=EntityResponse)
def get_entity(
    entity_id: str = Path(..., title="The ID of the entity to retrieve"),
    registry: EntityRegistry = Depends(get_entity_registry)
):
    """
    Get a specific entity by ID.
    """
    return EntityResponse.from_domain(registry.get_entity(entity_id))

@router.get("/entities/{entity_id}/missing-info", response_model=MissingInfoResponse)
def get_missing_info(
    entity_id: str = Path(..., title="The ID of the entity"),
    tracker: InteractionTracker = Depends(get_interaction_tracker)
):
    """
    Required attributes that had no value when the entity was created.
    """
    return MissingInfoResponse(entity_id=entity_id, missing_info_attributes=tracker.missing_info(entity_id))

@router.post("/entities/{entity_id}/request-info", response_model=RequestInfoResponse, status_code=201)
def request_info(
    payload: RequestInfoPayload,
    entity_id: str = Path(..., title="The ID of the entity to request information on"),
    user_id: str = Depends(get_current_user_id),
    tracker: InteractionTracker = Depends(get_interaction_tracker)
):
    """
    Ask the owner for more information, optionally about specific attributes.
    """
    tracker.request_info(
        entity_id=entity_id,
        requesting_user_id=user_id,
        message=payload.message,
        attribute_names=payload.attribute_names,
    )
    return RequestInfoResponse(success=True, entity_id=entity_id)

@router.get("/entities/{entity_id}/requests", response_model=RequestStateResponse)
def get_request_state(
    entity_id: str = Path(..., title="The ID of the entity"),
    user_id: str = Depends(get_current_user_id),
    tracker: InteractionTracker = Depends(get_interaction_tracker)
):
    """
    Owner view: missing attributes, requesting users and the interaction log.
    """
    return RequestStateResponse.from_domain(tracker.request_state(entity_id, user_id))
