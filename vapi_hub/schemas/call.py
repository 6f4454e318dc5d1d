import re
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional

# Format E.164: '+', indicatif pays, 15 chiffres au plus
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

class CallInitiateRequest(BaseModel):
    """Schéma pour l'initiation d'un appel sortant"""
    agent_id: int
    customer_number: str = Field(..., min_length=1)
    phone_number_id: Optional[str] = None
    assistant_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("customer_number")
    @classmethod
    def check_international_format(cls, value: str) -> str:
        if not E164_PATTERN.match(value):
            raise ValueError("Phone number must be in E.164 format: '+' followed by country code and up to 15 digits")
        return value
