from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vapi_hub.db.base import Base

class CallLogEntry(Base):
    """Modèle pour l'historique des appels (ajout uniquement)"""
    __tablename__ = "vapi_call_logs"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("vapi_agents.id"), index=True, nullable=False)
    call_id = Column(String(255), nullable=False)  # ID d'appel chez Vapi
    caller_number = Column(String(20), nullable=True)
    duration = Column(Integer, nullable=True)  # durée en secondes
    status = Column(String(50), nullable=True)  # "initiated", "ringing", "connected", "completed", ...
    transcript = Column(Text, nullable=True)
    recording_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relations
    agent = relationship("AgentConfig", back_populates="call_logs")
