"""
catalog-api Application Package

Directory Structure:
├── routers/           # FastAPI route handlers
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Services: registries, interaction tracker, filter engine, OTP sign-in
├── domain/            # Attributes, records, errors, events, specifications, ports
├── infrastructure/    # Email API and identity provider adapters
├── db/                # SQLAlchemy models, repositories and initialization
└── config.py          # Application configuration

Record Types Clarification:
1. **API Schemas** (catalog.schemas.api_schemas): Pydantic models for HTTP requests/responses
2. **Domain Records** (catalog.domain.entities): dataclasses passed between layers
3. **Database Models** (catalog.db.models): SQLAlchemy tables

Entity types define predefined attributes; entities instantiate a type with
attribute values. The missing-info list is fixed when an entity is created,
while information requests keep accumulating in the entity's interaction log.
"""
