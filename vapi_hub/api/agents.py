from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from vapi_hub.db.base import get_db
from vapi_hub.db import crud
from vapi_hub.schemas.agent import AgentConfig as AgentConfigSchema, AgentConfigCreate, AgentConfigUpdate
from vapi_hub.core.auth import get_current_user
from vapi_hub.api.dependencies import VapiClientFactory, ensure_owner, get_vapi_client_factory

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_model=List[AgentConfigSchema])
async def read_agents(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Récupère tous les agents de l'utilisateur"""
    return crud.list_agents_for_user(db, str(current_user["id"]))

@router.post("/", response_model=AgentConfigSchema, status_code=status.HTTP_201_CREATED)
async def create_agent(
    agent_data: AgentConfigCreate,
    verify: bool = False,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    client_factory: VapiClientFactory = Depends(get_vapi_client_factory)
):
    """
    Enregistre un agent Vapi.

    Avec `verify=true`, l'identifiant externe est d'abord résolu auprès de
    Vapi avec la clé fournie; en cas d'échec rien n'est enregistré.
    """
    if verify:
        client = client_factory(agent_data.api_key)
        await client.get_agent(agent_data.external_agent_id)
        logger.info(f"Agent Vapi vérifié: {agent_data.external_agent_id}")

    fields: Dict[str, Any] = agent_data.model_dump()
    fields["owner_id"] = str(current_user["id"])
    return crud.create_agent(db, fields)

@router.get("/{agent_id}", response_model=Optional[AgentConfigSchema])
async def read_agent(
    agent_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Récupère un agent spécifique (null s'il n'existe pas)"""
    agent = crud.get_agent(db, agent_id)
    if agent is None:
        return None
    return ensure_owner(agent, current_user)

@router.put("/{agent_id}", response_model=Optional[AgentConfigSchema])
async def update_agent(
    agent_id: int,
    agent_data: AgentConfigUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Met à jour les champs fournis d'un agent (null s'il n'existe pas)"""
    agent = crud.get_agent(db, agent_id)
    if agent is None:
        return None
    ensure_owner(agent, current_user)

    update_data = agent_data.model_dump(exclude_unset=True)
    # Colonnes obligatoires: un null explicite est ignoré
    for key in ("name", "is_active"):
        if key in update_data and update_data[key] is None:
            del update_data[key]

    return crud.update_agent(db, agent_id, update_data)

@router.delete("/{agent_id}")
async def delete_agent(
    agent_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Supprime un agent et son historique d'appels (sans effet s'il n'existe pas)"""
    agent = crud.get_agent(db, agent_id)
    if agent is not None:
        ensure_owner(agent, current_user)
        crud.delete_agent(db, agent_id)

    return {"success": True}
