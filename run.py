import logging
import uvicorn
from catalog.config import settings
from catalog.db import init_db

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)

    # Make sure the database, tables and default entity types exist
    init_db()

    # Start the API server
    print(f"Starting API server on {settings.API_HOST}:{settings.API_PORT}...")
    uvicorn.run(
        "catalog.main:app", 
        host=settings.API_HOST, 
        port=settings.API_PORT, 
        reload=settings.API_RELOAD
    )
