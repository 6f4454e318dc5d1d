import logging
import httpx
from typing import Any, Dict, Optional, Type, TypeVar, Union
from urllib.parse import quote

from vapi_hub.core.config import settings
from vapi_hub.schemas.vapi import (
    AgentPayload,
    AgentUpdatePayload,
    AssistantPayload,
    CallFilters,
    CallPayload,
    CredentialPayload,
    PhoneNumberPayload,
    ResourceKind,
    VapiPayload,
)

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=VapiPayload)

class RemoteCallFailed(Exception):
    """
    Échec d'un appel à l'API Vapi (transport ou réponse HTTP en erreur).

    `message` contient le message renvoyé par Vapi s'il existe,
    sinon le texte de l'erreur de transport.
    """

    def __init__(self, action: str, message: str, status_code: Optional[int] = None):
        self.action = action
        self.message = message
        self.status_code = status_code
        super().__init__(f"Failed to {action}: {message}")

def _as_payload(payload_cls: Type[P], payload: Union[P, Dict[str, Any]]) -> P:
    if isinstance(payload, payload_cls):
        return payload
    return payload_cls.model_validate(payload)

def _require_id(name: str, value: str) -> str:
    if not value:
        raise ValueError(f"{name} is required")
    return value

def _resource_path(kind: ResourceKind, name: Optional[str] = None, resource_id: Optional[str] = None) -> str:
    """
    Construit le chemin d'une ressource Vapi.

    L'identifiant est encodé comme un seul segment: il ne peut ni remonter
    dans l'arborescence ni ajouter de paramètres de requête.
    """
    if name is None:
        return f"/{kind.value}"
    _require_id(name, resource_id)
    if resource_id in (".", ".."):
        raise ValueError(f"{name} is not a valid identifier")
    return f"/{kind.value}/{quote(resource_id, safe='')}"

def _upstream_message(response: httpx.Response) -> Optional[str]:
    """Extrait le champ `message` du corps d'erreur de Vapi"""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, list):
        return "; ".join(str(item) for item in message)
    return message or None

class VapiClient:
    """
    Client pour l'API REST de Vapi.

    La clé API est fixée à la construction; le client ne garde aucun autre
    état entre deux appels.
    """

    def __init__(self, api_key: str, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = _require_id("api_key", api_key)
        self.base_url = base_url or settings.vapi_base_url
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        payload: Optional[VapiPayload] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Envoie une requête à Vapi et renvoie le corps JSON de la réponse"""
        logger.info(f"Appel Vapi: {method} {path}")
        body = payload.to_request_body() if payload is not None else None

        try:
            async with httpx.AsyncClient(base_url=self.base_url, headers=self._headers(), transport=self.transport) as client:
                response = await client.request(method, path, json=body, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _upstream_message(e.response) or f"HTTP {e.response.status_code}"
            logger.error(f"Erreur Vapi lors de '{action}': {e.response.status_code} - {message}")
            raise RemoteCallFailed(action, message, e.response.status_code) from e
        except httpx.RequestError as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Erreur de transport vers Vapi lors de '{action}': {message}")
            raise RemoteCallFailed(action, message) from e

        if not response.content:
            return {"success": True}

        try:
            return response.json()
        except ValueError as e:
            raise RemoteCallFailed(action, "Invalid JSON in response", response.status_code) from e

    # Credentials

    async def create_credential(self, credential: Union[CredentialPayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(CredentialPayload, credential)
        return await self._request("POST", _resource_path(ResourceKind.CREDENTIAL), "create credential", payload)

    async def get_credential(self, credential_id: str) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.CREDENTIAL, "credential_id", credential_id), "get credential")

    async def list_credentials(self) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.CREDENTIAL), "list credentials")

    async def delete_credential(self, credential_id: str) -> Any:
        return await self._request("DELETE", _resource_path(ResourceKind.CREDENTIAL, "credential_id", credential_id), "delete credential")

    # Agents

    async def create_agent(self, agent: Union[AgentPayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(AgentPayload, agent)
        return await self._request("POST", _resource_path(ResourceKind.AGENT), "create agent", payload)

    async def get_agent(self, agent_id: str) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.AGENT, "agent_id", agent_id), "get agent")

    async def list_agents(self) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.AGENT), "list agents")

    async def update_agent(self, agent_id: str, updates: Union[AgentUpdatePayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(AgentUpdatePayload, updates)
        return await self._request("PATCH", _resource_path(ResourceKind.AGENT, "agent_id", agent_id), "update agent", payload)

    async def delete_agent(self, agent_id: str) -> Any:
        return await self._request("DELETE", _resource_path(ResourceKind.AGENT, "agent_id", agent_id), "delete agent")

    # Phone numbers

    async def create_phone_number(self, phone_number: Union[PhoneNumberPayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(PhoneNumberPayload, phone_number)
        return await self._request("POST", _resource_path(ResourceKind.PHONE_NUMBER), "create phone number", payload)

    async def get_phone_number(self, phone_number_id: str) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.PHONE_NUMBER, "phone_number_id", phone_number_id), "get phone number")

    async def list_phone_numbers(self) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.PHONE_NUMBER), "list phone numbers")

    async def delete_phone_number(self, phone_number_id: str) -> Any:
        return await self._request("DELETE", _resource_path(ResourceKind.PHONE_NUMBER, "phone_number_id", phone_number_id), "delete phone number")

    # Calls

    async def create_call(self, call: Union[CallPayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(CallPayload, call)
        return await self._request("POST", _resource_path(ResourceKind.CALL), "create call", payload)

    async def get_call(self, call_id: str) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.CALL, "call_id", call_id), "get call")

    async def list_calls(self, filters: Union[CallFilters, Dict[str, Any], None] = None) -> Any:
        params = _as_payload(CallFilters, filters or {}).to_request_body() or None
        return await self._request("GET", _resource_path(ResourceKind.CALL), "list calls", params=params)

    # Assistants

    async def create_assistant(self, assistant: Union[AssistantPayload, Dict[str, Any]]) -> Any:
        payload = _as_payload(AssistantPayload, assistant)
        return await self._request("POST", _resource_path(ResourceKind.ASSISTANT), "create assistant", payload)

    async def get_assistant(self, assistant_id: str) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.ASSISTANT, "assistant_id", assistant_id), "get assistant")

    async def list_assistants(self) -> Any:
        return await self._request("GET", _resource_path(ResourceKind.ASSISTANT), "list assistants")
