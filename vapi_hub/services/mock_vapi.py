"""
Simulation de l'API Vapi pour les démonstrations et les tests.

Les données vivent dans un `MockVapiStore` explicite (un par application),
jamais dans des variables globales. La progression d'un appel est déduite
du temps écoulé depuis sa création, sans tâche de fond.
"""
import copy
import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from vapi_hub.schemas.vapi import (
    AgentPayload,
    AgentUpdatePayload,
    AssistantPayload,
    CallFilters,
    CallPayload,
    CredentialPayload,
    PhoneNumberPayload,
)
from vapi_hub.services.vapi_client import RemoteCallFailed, _as_payload, _require_id

logger = logging.getLogger(__name__)

# Délais (en secondes) avant de passer à "ringing" puis "connected"
RINGING_AFTER = 2
CONNECTED_AFTER = 5

DEFAULT_MODEL = {"provider": "openai", "model": "gpt-4"}
DEFAULT_VOICE = {"provider": "elevenlabs", "voiceId": "EXAVITQu4vr4xnSDxMaL"}

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

class MockVapiStore:
    """Ressources Vapi simulées, initialisées avec un jeu de démonstration"""

    def __init__(self):
        self.credentials: Dict[str, Dict[str, Any]] = {}
        self.agents: Dict[str, Dict[str, Any]] = {}
        self.phone_numbers: Dict[str, Dict[str, Any]] = {}
        self.calls: Dict[str, Dict[str, Any]] = {}
        self.assistants: Dict[str, Dict[str, Any]] = {}
        self.call_started_at: Dict[str, float] = {}
        self._seed()

    def _seed(self):
        created_at = _now_iso()
        self.credentials["cred_demo_twilio_001"] = {
            "id": "cred_demo_twilio_001",
            "provider": "twilio",
            "createdAt": created_at,
        }
        self.phone_numbers["phone_demo_001"] = {
            "id": "phone_demo_001",
            "phoneNumber": "+15551234567",
            "credentialId": "cred_demo_twilio_001",
            "createdAt": created_at,
        }
        self.agents["agent_demo_001"] = {
            "id": "agent_demo_001",
            "name": "Demo Customer Support Agent",
            "model": dict(DEFAULT_MODEL),
            "voice": dict(DEFAULT_VOICE),
            "phoneNumberId": "phone_demo_001",
            "credentialIds": ["cred_demo_twilio_001"],
            "createdAt": created_at,
        }
        self.assistants["asst_demo_001"] = {
            "id": "asst_demo_001",
            "name": "Demo Assistant",
            "model": dict(DEFAULT_MODEL),
            "createdAt": created_at,
        }

class MockVapiClient:
    """Même interface que `VapiClient`, adossée à un `MockVapiStore`"""

    def __init__(self, store: MockVapiStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def _new_id(self, prefix: str) -> str:
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
        return f"{prefix}_{int(self.clock() * 1000)}_{suffix}"

    @staticmethod
    def _lookup(collection: Dict[str, Dict[str, Any]], resource_id: str, label: str, action: str) -> Dict[str, Any]:
        resource = collection.get(resource_id)
        if resource is None:
            raise RemoteCallFailed(action, f"{label} {resource_id} not found", 404)
        return copy.deepcopy(resource)

    # Credentials

    async def create_credential(self, credential: Union[CredentialPayload, Dict[str, Any]]) -> Dict[str, Any]:
        body = _as_payload(CredentialPayload, credential).to_request_body()
        credential_id = self._new_id("cred")
        new_credential = {"id": credential_id, "createdAt": _now_iso(), **body}
        self.store.credentials[credential_id] = new_credential
        logger.info(f"Credential simulé créé: {credential_id}")
        return copy.deepcopy(new_credential)

    async def get_credential(self, credential_id: str) -> Dict[str, Any]:
        _require_id("credential_id", credential_id)
        return self._lookup(self.store.credentials, credential_id, "Credential", "get credential")

    async def list_credentials(self):
        return copy.deepcopy(list(self.store.credentials.values()))

    async def delete_credential(self, credential_id: str) -> Dict[str, Any]:
        _require_id("credential_id", credential_id)
        self.store.credentials.pop(credential_id, None)
        return {"success": True}

    # Agents

    async def create_agent(self, agent: Union[AgentPayload, Dict[str, Any]]) -> Dict[str, Any]:
        body = _as_payload(AgentPayload, agent).to_request_body()
        agent_id = self._new_id("agent")
        new_agent = {
            "id": agent_id,
            "voice": dict(DEFAULT_VOICE),
            "credentialIds": [],
            "createdAt": _now_iso(),
            **body,
        }
        self.store.agents[agent_id] = new_agent
        logger.info(f"Agent simulé créé: {agent_id}")
        return copy.deepcopy(new_agent)

    async def get_agent(self, agent_id: str) -> Dict[str, Any]:
        _require_id("agent_id", agent_id)
        return self._lookup(self.store.agents, agent_id, "Agent", "get agent")

    async def list_agents(self):
        return copy.deepcopy(list(self.store.agents.values()))

    async def update_agent(self, agent_id: str, updates: Union[AgentUpdatePayload, Dict[str, Any]]) -> Dict[str, Any]:
        _require_id("agent_id", agent_id)
        agent = self._lookup(self.store.agents, agent_id, "Agent", "update agent")
        agent.update(_as_payload(AgentUpdatePayload, updates).to_request_body())
        self.store.agents[agent_id] = agent
        return copy.deepcopy(agent)

    async def delete_agent(self, agent_id: str) -> Dict[str, Any]:
        _require_id("agent_id", agent_id)
        self.store.agents.pop(agent_id, None)
        return {"success": True}

    # Phone numbers

    async def create_phone_number(self, phone_number: Union[PhoneNumberPayload, Dict[str, Any]]) -> Dict[str, Any]:
        payload = _as_payload(PhoneNumberPayload, phone_number)
        phone_number_id = self._new_id("phone")
        new_number = {
            "id": phone_number_id,
            "phoneNumber": payload.phone_number,
            "credentialId": payload.credential_id,
            "createdAt": _now_iso(),
        }
        self.store.phone_numbers[phone_number_id] = new_number
        return copy.deepcopy(new_number)

    async def get_phone_number(self, phone_number_id: str) -> Dict[str, Any]:
        _require_id("phone_number_id", phone_number_id)
        return self._lookup(self.store.phone_numbers, phone_number_id, "Phone number", "get phone number")

    async def list_phone_numbers(self):
        return copy.deepcopy(list(self.store.phone_numbers.values()))

    async def delete_phone_number(self, phone_number_id: str) -> Dict[str, Any]:
        _require_id("phone_number_id", phone_number_id)
        self.store.phone_numbers.pop(phone_number_id, None)
        return {"success": True}

    # Calls

    async def create_call(self, call: Union[CallPayload, Dict[str, Any]]) -> Dict[str, Any]:
        payload = _as_payload(CallPayload, call)
        call_id = self._new_id("call")
        new_call = {
            "id": call_id,
            "agentId": payload.agent_id,
            "assistantId": payload.assistant_id,
            "phoneNumberId": payload.phone_number_id,
            "customerNumber": payload.customer_number,
            "status": "initiated",
            "duration": 0,
            "createdAt": _now_iso(),
        }
        self.store.calls[call_id] = new_call
        self.store.call_started_at[call_id] = self.clock()
        logger.info(f"Appel simulé créé: {call_id}")
        return copy.deepcopy(new_call)

    def _progress(self, call: Dict[str, Any]) -> Dict[str, Any]:
        started_at = self.store.call_started_at.get(call["id"])
        if started_at is None or call["status"] not in ("initiated", "ringing"):
            return call

        elapsed = self.clock() - started_at
        if elapsed >= CONNECTED_AFTER:
            call["status"] = "connected"
        elif elapsed >= RINGING_AFTER:
            call["status"] = "ringing"
        self.store.calls[call["id"]]["status"] = call["status"]
        return call

    async def get_call(self, call_id: str) -> Dict[str, Any]:
        _require_id("call_id", call_id)
        call = self._lookup(self.store.calls, call_id, "Call", "get call")
        return self._progress(call)

    async def list_calls(self, filters: Union[CallFilters, Dict[str, Any], None] = None):
        params = _as_payload(CallFilters, filters or {})
        calls = [self._progress(copy.deepcopy(call)) for call in self.store.calls.values()]
        start = params.offset or 0
        end = start + params.limit if params.limit else None
        return calls[start:end]

    # Assistants

    async def create_assistant(self, assistant: Union[AssistantPayload, Dict[str, Any]]) -> Dict[str, Any]:
        body = _as_payload(AssistantPayload, assistant).to_request_body()
        assistant_id = self._new_id("asst")
        new_assistant = {
            "id": assistant_id,
            "model": dict(DEFAULT_MODEL),
            "voice": dict(DEFAULT_VOICE),
            "createdAt": _now_iso(),
            **body,
        }
        self.store.assistants[assistant_id] = new_assistant
        return copy.deepcopy(new_assistant)

    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]:
        _require_id("assistant_id", assistant_id)
        return self._lookup(self.store.assistants, assistant_id, "Assistant", "get assistant")

    async def list_assistants(self):
        return copy.deepcopy(list(self.store.assistants.values()))
