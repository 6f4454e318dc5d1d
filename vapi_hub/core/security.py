import hmac
from typing import Optional
from fastapi.security import APIKeyHeader
from vapi_hub.core.config import settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

def is_valid_api_key(api_key: Optional[str]) -> bool:
    """Compare la clé fournie à API_SECRET_KEY (toujours faux si elle n'est pas configurée)"""
    if not api_key or not settings.api_secret_key:
        return False
    return hmac.compare_digest(api_key, settings.api_secret_key)
