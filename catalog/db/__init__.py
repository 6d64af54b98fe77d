from catalog.db.models import Base
from catalog.db.database import engine, get_db

# Import the comprehensive initialization function
from catalog.db.init_db import init_database

# Create database and tables if they don't exist
def init_db():
    """Initialize the database - create the database, tables and seed types if needed."""
    init_database()
