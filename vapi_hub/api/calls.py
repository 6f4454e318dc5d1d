from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict
import logging

from vapi_hub.db.base import get_db
from vapi_hub.db import crud
from vapi_hub.core.auth import get_current_user
from vapi_hub.schemas.call import CallInitiateRequest
from vapi_hub.schemas.vapi import CallPayload
from vapi_hub.api.dependencies import VapiClientFactory, get_vapi_client_factory, load_owned_agent

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/initiate", response_model=Dict[str, Any])
async def initiate_call(
    call_data: CallInitiateRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    client_factory: VapiClientFactory = Depends(get_vapi_client_factory)
):
    """
    Initie un appel sortant avec un agent Vapi de l'utilisateur

    L'appel est d'abord passé chez Vapi, puis enregistré dans l'historique
    avec le statut "initiated". Si l'enregistrement échoue, l'appel est
    déjà en cours: la réponse porte alors `call_log_id = null` et l'entrée
    peut être ajoutée plus tard via POST /call-logs/.
    """
    agent = load_owned_agent(db, call_data.agent_id, current_user)

    # Vérifier que l'agent est actif
    if not agent.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Agent is not active")

    payload = CallPayload(
        customer_number=call_data.customer_number,
        agent_id=agent.external_agent_id,
        assistant_id=call_data.assistant_id or agent.assistant_id,
        phone_number_id=call_data.phone_number_id,
        metadata=call_data.metadata,
    )

    logger.info(f"Initiation d'un appel: agent={agent.id}, numéro={call_data.customer_number}")
    client = client_factory(agent.api_key)
    remote_call = await client.create_call(payload)

    external_call_id = remote_call.get("id") if isinstance(remote_call, dict) else None
    call_log_id = None

    if not external_call_id:
        logger.warning(f"Réponse Vapi sans identifiant d'appel, historique non mis à jour: agent={agent.id}")
    else:
        try:
            db_log = crud.create_call_log(db, {
                "agent_id": agent.id,
                "call_id": external_call_id,
                "caller_number": call_data.customer_number,
                "status": "initiated",
            })
            call_log_id = db_log.id
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Appel {external_call_id} passé mais non enregistré dans l'historique: {e}")

    return {
        "call": remote_call,
        "call_log_id": call_log_id,
    }

@router.get("/status", response_model=Dict[str, Any])
async def get_call_status(
    agent_id: int,
    call_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    client_factory: VapiClientFactory = Depends(get_vapi_client_factory)
):
    """Récupère le statut d'un appel directement auprès de Vapi"""
    agent = load_owned_agent(db, agent_id, current_user)

    client = client_factory(agent.api_key)
    return await client.get_call(call_id)
