"""
Database initialization utilities.
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from catalog.db.models import Base
from catalog.db.database import create_database_if_not_exists
from catalog.db.repositories.entity_types import EntityTypeRepository
from catalog.db.seed import DEFAULT_ENTITY_TYPES
from catalog.config import get_db_components

logger = logging.getLogger(__name__)


def create_tables(engine=None):
    """Create all tables defined in models."""
    own_engine = engine is None
    engine = engine or create_engine(get_db_components()["db_url"])

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created successfully")

    if own_engine:
        engine.dispose()


def drop_all_tables(engine=None):
    """Drop all tables (useful for testing)."""
    own_engine = engine is None
    engine = engine or create_engine(get_db_components()["db_url"])

    logger.info("Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("All tables dropped successfully")

    if own_engine:
        engine.dispose()


def seed_entity_types(db: Session) -> int:
    """Register the default entity types that are not present yet."""
    repo = EntityTypeRepository(db)
    created = 0
    for entity_type in DEFAULT_ENTITY_TYPES:
        if repo.get_entity_type(entity_type.id) is None:
            repo.create_entity_type(entity_type)
            created += 1
    logger.info(f"Seeded {created} entity types")
    return created


def init_database():
    """Complete database initialization."""
    logger.info("Initializing database...")
    create_database_if_not_exists()

    engine = create_engine(get_db_components()["db_url"])
    try:
        create_tables(engine)
        with Session(engine) as db:
            seed_entity_types(db)
    finally:
        engine.dispose()
    logger.info("Database initialization complete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
