from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from vapi_hub.core.config import settings

# SQLite refuse par défaut les connexions partagées entre threads
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Création du moteur SQLAlchemy
engine = create_engine(settings.database_url, connect_args=connect_args)

# Création de la session
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Classe de base pour les modèles
Base = declarative_base()

# Fonction pour obtenir une session de base de données
def get_db():
    """Fournit une session de base de données"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
