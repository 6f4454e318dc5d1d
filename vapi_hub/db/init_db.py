import logging
from sqlalchemy.exc import SQLAlchemyError
from vapi_hub.db.base import Base, engine
from vapi_hub.models.agent import AgentConfig  # Importer les modèles
from vapi_hub.models.call_log import CallLogEntry

logger = logging.getLogger(__name__)

def create_tables(bind=None):
    """Crée les tables dans la base de données"""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Base de données initialisée avec succès")
    except SQLAlchemyError as e:
        logger.error(f"Erreur lors de l'initialisation de la base de données: {e}")
