from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
import logging

from catalog.config import settings, get_db_components

logger = logging.getLogger(__name__)

def create_database_if_not_exists():
    """Create the PostgreSQL database if it doesn't exist."""
    db_components = get_db_components()
    if db_components["backend"] != "postgresql":
        logger.info(f"Skipping database creation for {db_components['backend']} backend")
        return

    db_name = db_components["db_name"]

    # Connect to default postgres database to check if our db exists
    conn = psycopg2.connect(db_components["db_url_without_name"])
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (db_name,))
        exists = cursor.fetchone()

        if not exists:
            logger.info(f"Database '{db_name}' does not exist. Creating...")
            # Database names cannot be parameterized in CREATE DATABASE;
            # db_name is validated by get_db_components()
            cursor.execute(f'CREATE DATABASE "{db_name}"')
            logger.info(f"Database '{db_name}' created successfully")
        else:
            logger.info(f"Database '{db_name}' already exists")
    finally:
        cursor.close()
        conn.close()

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a database session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
