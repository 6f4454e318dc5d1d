import logging
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    app_name: str = "Vapi Hub"

    # Configuration base de données
    database_url: str = "sqlite:///./vapi_hub.db"

    # Configuration Vapi
    vapi_base_url: str = "https://api.vapi.ai"
    vapi_mock_mode: bool = False

    # Configuration Supabase (authentification des utilisateurs)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_jwt_audience: str = "authenticated"

    # Clé API pour les appels de service à service
    api_secret_key: str = ""

    # Configuration CORS (liste séparée par des virgules)
    cors_origins: str = "http://localhost:3000"

    # Configuration de l'application
    debug: bool = False

    # Configuration du déploiement
    port: int = 8000
    host: str = "0.0.0.0"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Validation des configurations essentielles
        if not self.supabase_jwt_secret and not self.supabase_url:
            logger.warning("Supabase configuration is missing, user authentication will fail")

        if not self.api_secret_key:
            logger.warning("API_SECRET_KEY is not set, service callers cannot record call logs")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

settings = Settings()
