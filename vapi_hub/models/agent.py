from sqlalchemy import Boolean, Column, String, Integer, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vapi_hub.db.base import Base

class AgentConfig(Base):
    """Modèle pour les agents Vapi configurés par un utilisateur"""
    __tablename__ = "vapi_agents"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String, index=True, nullable=False)  # ID Supabase de l'utilisateur
    name = Column(String(255), nullable=False)
    external_agent_id = Column(String(255), nullable=False)  # ID de l'agent chez Vapi
    api_key = Column(Text, nullable=False)  # Ne jamais renvoyer au client
    public_key = Column(Text, nullable=True)
    assistant_id = Column(String(255), nullable=True)
    phone_number = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relations
    call_logs = relationship("CallLogEntry", back_populates="agent", cascade="save-update, merge, delete")
