from typing import Any, Callable, Dict, Optional, Union
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging

from vapi_hub.core.auth import get_current_user
from vapi_hub.core.config import settings
from vapi_hub.core.security import api_key_header, is_valid_api_key
from vapi_hub.db import crud
from vapi_hub.models.agent import AgentConfig
from vapi_hub.services.mock_vapi import MockVapiClient, MockVapiStore
from vapi_hub.services.vapi_client import VapiClient

logger = logging.getLogger(__name__)

VapiClientFactory = Callable[[str], Union[VapiClient, MockVapiClient]]

optional_bearer = HTTPBearer(auto_error=False)

def get_mock_vapi_store(request: Request) -> MockVapiStore:
    """Renvoie le store simulé attaché à l'application"""
    return request.app.state.mock_vapi_store

def get_vapi_client_factory(store: MockVapiStore = Depends(get_mock_vapi_store)) -> VapiClientFactory:
    """
    Dépendance fournissant une fabrique de clients Vapi.

    La fabrique prend la clé API de l'agent concerné; en mode simulation
    (VAPI_MOCK_MODE) elle renvoie un client adossé au store de l'application.
    """
    if settings.vapi_mock_mode:
        return lambda api_key: MockVapiClient(store)
    return lambda api_key: VapiClient(api_key)

def ensure_owner(agent: AgentConfig, current_user: Dict[str, Any]) -> AgentConfig:
    """
    Vérifie que l'agent appartient à l'utilisateur.

    Raises:
        HTTPException: 403 si l'agent appartient à un autre utilisateur
    """
    if agent.owner_id != str(current_user["id"]):
        logger.warning(f"Accès refusé à l'agent {agent.id} pour l'utilisateur {current_user['id']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this agent",
        )
    return agent

def load_owned_agent(db: Session, agent_id: int, current_user: Dict[str, Any]) -> AgentConfig:
    """
    Charge un agent appartenant à l'utilisateur, pour les opérations
    qui ne peuvent pas continuer sans lui.

    Raises:
        HTTPException: 404 si l'agent n'existe pas, 403 s'il appartient à un autre utilisateur
    """
    agent = crud.get_agent(db, agent_id)
    if agent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")
    return ensure_owner(agent, current_user)

async def get_call_log_writer(
    api_key: Optional[str] = Depends(api_key_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
) -> Dict[str, Any]:
    """
    Dépendance pour l'ajout d'entrées à l'historique des appels.

    Accepte soit un service authentifié par X-API-Key, soit un utilisateur
    authentifié (la propriété de l'agent est alors vérifiée par la route).
    """
    if is_valid_api_key(api_key):
        return {"service": True}

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await get_current_user(credentials)
    return {"service": False, "user": user}
