"""
Accès direct aux ressources Vapi d'un agent (credentials, numéros,
assistants, agents, appels) avec la clé API stockée de cet agent.

Les réponses de Vapi sont renvoyées telles quelles.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from vapi_hub.db.base import get_db
from vapi_hub.core.auth import get_current_user
from vapi_hub.schemas.vapi import (
    AgentPayload,
    AgentUpdatePayload,
    AssistantPayload,
    CallFilters,
    CredentialPayload,
    PhoneNumberPayload,
)
from vapi_hub.api.dependencies import VapiClientFactory, get_vapi_client_factory, load_owned_agent

router = APIRouter()

def get_agent_client(
    agent_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    client_factory: VapiClientFactory = Depends(get_vapi_client_factory)
):
    """Client Vapi authentifié avec la clé d'un agent de l'utilisateur"""
    agent = load_owned_agent(db, agent_id, current_user)
    return client_factory(agent.api_key)

# Credentials

@router.get("/credentials")
async def list_credentials(client=Depends(get_agent_client)):
    return await client.list_credentials()

@router.post("/credentials", status_code=201)
async def create_credential(credential: CredentialPayload, client=Depends(get_agent_client)):
    return await client.create_credential(credential)

@router.get("/credentials/{credential_id}")
async def get_credential(credential_id: str, client=Depends(get_agent_client)):
    return await client.get_credential(credential_id)

@router.delete("/credentials/{credential_id}")
async def delete_credential(credential_id: str, client=Depends(get_agent_client)):
    return await client.delete_credential(credential_id)

# Phone numbers

@router.get("/phone-numbers")
async def list_phone_numbers(client=Depends(get_agent_client)):
    return await client.list_phone_numbers()

@router.post("/phone-numbers", status_code=201)
async def create_phone_number(phone_number: PhoneNumberPayload, client=Depends(get_agent_client)):
    return await client.create_phone_number(phone_number)

@router.get("/phone-numbers/{phone_number_id}")
async def get_phone_number(phone_number_id: str, client=Depends(get_agent_client)):
    return await client.get_phone_number(phone_number_id)

@router.delete("/phone-numbers/{phone_number_id}")
async def delete_phone_number(phone_number_id: str, client=Depends(get_agent_client)):
    return await client.delete_phone_number(phone_number_id)

# Assistants

@router.get("/assistants")
async def list_assistants(client=Depends(get_agent_client)):
    return await client.list_assistants()

@router.post("/assistants", status_code=201)
async def create_assistant(assistant: AssistantPayload, client=Depends(get_agent_client)):
    return await client.create_assistant(assistant)

@router.get("/assistants/{assistant_id}")
async def get_assistant(assistant_id: str, client=Depends(get_agent_client)):
    return await client.get_assistant(assistant_id)

# Agents Vapi

@router.get("/agents")
async def list_remote_agents(client=Depends(get_agent_client)):
    return await client.list_agents()

@router.post("/agents", status_code=201)
async def create_remote_agent(agent: AgentPayload, client=Depends(get_agent_client)):
    return await client.create_agent(agent)

@router.get("/agents/{remote_agent_id}")
async def get_remote_agent(remote_agent_id: str, client=Depends(get_agent_client)):
    return await client.get_agent(remote_agent_id)

@router.patch("/agents/{remote_agent_id}")
async def update_remote_agent(remote_agent_id: str, updates: AgentUpdatePayload, client=Depends(get_agent_client)):
    return await client.update_agent(remote_agent_id, updates)

@router.delete("/agents/{remote_agent_id}")
async def delete_remote_agent(remote_agent_id: str, client=Depends(get_agent_client)):
    return await client.delete_agent(remote_agent_id)

# Appels

@router.get("/calls")
async def list_calls(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    client=Depends(get_agent_client)
):
    return await client.list_calls(CallFilters(limit=limit, offset=offset))

@router.get("/calls/{call_id}")
async def get_call(call_id: str, client=Depends(get_agent_client)):
    return await client.get_call(call_id)
