"""
Schémas des ressources envoyées à l'API Vapi.

Chaque type de ressource a son propre schéma: les champs nécessaires à Vapi
sont validés, les champs supplémentaires sont transmis tels quels.
Les noms sont sérialisés en camelCase, comme l'attend Vapi.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class ResourceKind(str, Enum):
    """Types de ressources exposées par Vapi (utilisés comme chemins d'URL)"""
    CREDENTIAL = "credential"
    AGENT = "agent"
    PHONE_NUMBER = "phone-number"
    CALL = "call"
    ASSISTANT = "assistant"

class VapiPayload(BaseModel):
    """Schéma de base pour les corps de requêtes Vapi"""
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    kind: ClassVar[Optional[ResourceKind]] = None

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

class ModelSettings(VapiPayload):
    """Modèle de langage utilisé par un agent ou un assistant"""
    provider: str
    model: str
    messages: Optional[List[Dict[str, str]]] = None
    temperature: Optional[float] = None

class VoiceSettings(VapiPayload):
    """Voix utilisée par un agent ou un assistant"""
    provider: str
    voice_id: Optional[str] = None

class CredentialPayload(VapiPayload):
    kind: ClassVar[ResourceKind] = ResourceKind.CREDENTIAL

    provider: str = Field(..., min_length=1)
    authorization_header: Optional[str] = None
    api_key: Optional[str] = None

class AgentPayload(VapiPayload):
    kind: ClassVar[ResourceKind] = ResourceKind.AGENT

    name: str = Field(..., min_length=1)
    model: ModelSettings
    voice: Optional[VoiceSettings] = None
    phone_number_id: Optional[str] = None
    credential_ids: Optional[List[str]] = None

class AgentUpdatePayload(VapiPayload):
    """Mise à jour partielle d'un agent Vapi"""
    kind: ClassVar[ResourceKind] = ResourceKind.AGENT

    name: Optional[str] = None
    model: Optional[ModelSettings] = None
    voice: Optional[VoiceSettings] = None
    phone_number_id: Optional[str] = None
    credential_ids: Optional[List[str]] = None

class PhoneNumberPayload(VapiPayload):
    kind: ClassVar[ResourceKind] = ResourceKind.PHONE_NUMBER

    phone_number: str = Field(..., min_length=1)
    credential_id: str = Field(..., min_length=1)

class CallPayload(VapiPayload):
    kind: ClassVar[ResourceKind] = ResourceKind.CALL

    customer_number: str = Field(..., min_length=1)
    phone_number_id: Optional[str] = None
    assistant_id: Optional[str] = None
    agent_id: Optional[str] = None

class AssistantPayload(VapiPayload):
    kind: ClassVar[ResourceKind] = ResourceKind.ASSISTANT

    name: str = Field(..., min_length=1)
    model: Optional[ModelSettings] = None
    voice: Optional[VoiceSettings] = None

class CallFilters(VapiPayload):
    """Paramètres de pagination pour la liste des appels"""
    kind: ClassVar[ResourceKind] = ResourceKind.CALL

    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
