"""
Health check endpoints for the API.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from typing import Dict, Any
from datetime import datetime
import logging

from catalog.config import settings
from catalog.db.database import get_db
from catalog.db.models import Entity, EntityType

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/health")
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status and version information.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }

@router.get("/health/database")
def database_health(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Check database health.
    Verifies the store answers and reports catalog sizes.
    """
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "entity_types": db.query(EntityType).count(),
            "entities": db.query(Entity).count(),
        }

    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "timestamp": datetime.now().isoformat(),
            "error": str(e)
        }

@router.get("/health/detailed")
def detailed_health(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check of all system components.
    """
    database_health_check = database_health(db)
    basic_health = health_check()

    return {
        "status": database_health_check["status"],
        "timestamp": datetime.now().isoformat(),
        "api": basic_health,
        "database": database_health_check,
        "config": {
            "email_delivery": "enabled" if settings.EMAIL_API_KEY else "logging_only",
            "identity_provider": "enabled" if settings.IDENTITY_PROVIDER_URL else "not_configured",
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        }
    }
