from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

# Valeur renvoyée à la place de la clé API stockée
SECRET_PLACEHOLDER = "***"

class AgentConfigBase(BaseModel):
    """Schéma de base pour les agents Vapi"""
    name: str = Field(..., min_length=1)
    external_agent_id: str = Field(..., min_length=1)
    public_key: Optional[str] = None
    assistant_id: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = None

class AgentConfigCreate(AgentConfigBase):
    """Schéma pour la création d'agents"""
    api_key: str = Field(..., min_length=1)

class AgentConfigUpdate(BaseModel):
    """Schéma pour la mise à jour d'agents"""
    name: Optional[str] = Field(default=None, min_length=1)
    public_key: Optional[str] = None
    assistant_id: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class AgentConfig(AgentConfigBase):
    """Schéma pour les réponses d'API, la clé API est toujours masquée"""
    id: int
    owner_id: str
    api_key: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("api_key")
    @classmethod
    def mask_api_key(cls, value: Optional[str]) -> Optional[str]:
        return SECRET_PLACEHOLDER if value else None
