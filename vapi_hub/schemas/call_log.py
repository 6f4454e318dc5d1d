from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class CallLogBase(BaseModel):
    """Schéma de base pour l'historique des appels"""
    agent_id: int
    call_id: str = Field(..., min_length=1)
    caller_number: Optional[str] = Field(default=None, max_length=20)
    duration: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, max_length=50)
    transcript: Optional[str] = None
    recording_url: Optional[str] = None

class CallLogCreate(CallLogBase):
    """Schéma pour l'ajout d'une entrée"""
    pass

class CallLog(CallLogBase):
    """Schéma pour les réponses d'API"""
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
