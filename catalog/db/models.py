"""
Database Models using SQLAlchemy.

These define the database schema for entity types, entities, users and
outstanding one-time codes. They are NOT the API schemas
(see catalog.schemas.api_schemas) nor the domain records
(see catalog.domain.entities); repositories translate between them.
"""
from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlalchemy.orm import declarative_base
import uuid

from catalog.domain.entities import utcnow

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

class EntityType(Base):
    __tablename__ = "entity_types"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    predefined_attributes = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)

class Entity(Base):
    __tablename__ = "entities"

    id = Column(String, primary_key=True, default=generate_uuid)
    # Not a foreign key: the type is looked up at read time
    type_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    attributes = Column(JSON, nullable=False, default=list)
    owner_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)
    missing_info_attributes = Column(JSON, nullable=False, default=list)
    requested_by_users = Column(JSON, nullable=False, default=list)
    interaction_log = Column(JSON, nullable=False, default=list)

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=utcnow)

class OneTimeCode(Base):
    __tablename__ = "one_time_codes"

    email = Column(String, primary_key=True)
    code = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False)
