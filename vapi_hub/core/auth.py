from typing import Any, Dict
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
import httpx
import logging
from vapi_hub.core.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def decode_session_token(token: str) -> Dict[str, Any]:
    """
    Vérifie localement un JWT Supabase signé avec le secret du projet
    """
    try:
        claims = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.supabase_jwt_audience,
        )
    except JWTError as e:
        logger.warning(f"Token JWT invalide: {e}")
        raise _unauthorized("Invalid authentication credentials")

    if not claims.get("sub"):
        raise _unauthorized("Invalid authentication credentials")

    return {
        "id": claims["sub"],
        "email": claims.get("email"),
        "app_metadata": claims.get("app_metadata", {}),
        "user_metadata": claims.get("user_metadata", {}),
    }

async def fetch_supabase_user(token: str) -> Dict[str, Any]:
    """
    Récupère les informations de l'utilisateur depuis l'API Supabase
    """
    try:
        async with httpx.AsyncClient() as client:
            headers = {
                "apikey": settings.supabase_key,
                "Authorization": f"Bearer {token}"
            }
            response = await client.get(
                f"{settings.supabase_url}/auth/v1/user",
                headers=headers
            )
    except httpx.HTTPError as e:
        logger.error(f"Authentication error: {str(e)}")
        raise _unauthorized("Authentication error")

    if response.status_code != 200:
        logger.error(f"Failed to verify token: {response.status_code} - {response.text}")
        raise _unauthorized("Invalid authentication credentials")

    user_data = response.json()
    return {
        "id": user_data["id"],
        "email": user_data.get("email"),
        "app_metadata": user_data.get("app_metadata", {}),
        "user_metadata": user_data.get("user_metadata", {})
    }

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, Any]:
    """
    Récupère l'utilisateur authentifié.

    Le JWT est vérifié localement si SUPABASE_JWT_SECRET est configuré,
    sinon il est validé auprès de l'API Supabase.
    """
    token = credentials.credentials

    if settings.supabase_jwt_secret:
        return decode_session_token(token)

    if not settings.supabase_url:
        logger.error("Aucune méthode d'authentification configurée")
        raise _unauthorized("Authentication is not configured")

    return await fetch_supabase_user(token)
