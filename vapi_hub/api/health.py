from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vapi_hub.db.base import get_db
from vapi_hub.core.config import settings

router = APIRouter()

@router.get("/")
async def health_check(db: Session = Depends(get_db)):
    """
    Vérifie la santé de l'application.

    Vérifie:
    - La connexion à la base de données
    - Les variables d'environnement essentielles
    """
    # Vérifier la connexion à la base de données
    try:
        # Exécuter une requête simple
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        db_status = f"error: {str(e)}"

    # Vérifier les variables d'environnement essentielles
    env_checks = {
        "vapi": bool(settings.vapi_base_url),
        "vapi_mock_mode": settings.vapi_mock_mode,
        "supabase": bool(settings.supabase_jwt_secret or (settings.supabase_url and settings.supabase_key)),
        "service_api_key": bool(settings.api_secret_key),
    }

    return {
        "status": "healthy",
        "database": db_status,
        "environment": env_checks
    }
