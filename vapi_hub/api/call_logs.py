from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from vapi_hub.db.base import get_db
from vapi_hub.db import crud
from vapi_hub.schemas.call_log import CallLog as CallLogSchema, CallLogCreate
from vapi_hub.core.auth import get_current_user
from vapi_hub.api.dependencies import ensure_owner, get_call_log_writer, load_owned_agent

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_model=List[CallLogSchema])
async def read_call_logs(
    agent_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Récupère l'historique des appels d'un agent de l'utilisateur"""
    load_owned_agent(db, agent_id, current_user)
    return crud.list_call_logs(db, agent_id)

@router.post("/", response_model=CallLogSchema, status_code=status.HTTP_201_CREATED)
async def create_call_log(
    log_data: CallLogCreate,
    db: Session = Depends(get_db),
    writer: dict = Depends(get_call_log_writer)
):
    """
    Ajoute une entrée à l'historique des appels.

    Utilisé par les services externes (X-API-Key) pour enregistrer le
    résultat d'un appel, ou par l'utilisateur pour compléter un historique.
    """
    agent = crud.get_agent(db, log_data.agent_id)
    if agent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")

    if not writer["service"]:
        ensure_owner(agent, writer["user"])

    db_log = crud.create_call_log(db, log_data.model_dump())
    logger.info(f"Appel enregistré: agent={agent.id}, call_id={db_log.call_id}, status={db_log.status}")
    return db_log
