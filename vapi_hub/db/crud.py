"""
Accès aux tables des agents Vapi et de l'historique des appels.

Ces fonctions ne vérifient jamais la propriété d'un agent: c'est le rôle
des routes API qui les appellent.
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from vapi_hub.models.agent import AgentConfig
from vapi_hub.models.call_log import CallLogEntry

logger = logging.getLogger(__name__)

def list_agents_for_user(db: Session, owner_id: str) -> List[AgentConfig]:
    """Récupère tous les agents d'un utilisateur"""
    return db.query(AgentConfig).filter(AgentConfig.owner_id == owner_id).all()

def get_agent(db: Session, agent_id: int) -> Optional[AgentConfig]:
    """Récupère un agent, ou None s'il n'existe pas"""
    return db.query(AgentConfig).filter(AgentConfig.id == agent_id).first()

def create_agent(db: Session, fields: Dict[str, Any]) -> AgentConfig:
    """Crée un agent; is_active vaut True par défaut"""
    data = dict(fields)
    if data.get("is_active") is None:
        data["is_active"] = True

    db_agent = AgentConfig(**data)
    db.add(db_agent)
    db.commit()
    db.refresh(db_agent)
    logger.info(f"Agent créé: id={db_agent.id}, owner={db_agent.owner_id}")
    return db_agent

def update_agent(db: Session, agent_id: int, fields: Dict[str, Any]) -> Optional[AgentConfig]:
    """
    Met à jour uniquement les champs fournis.
    Renvoie None si l'agent n'existe pas.
    """
    agent = get_agent(db, agent_id)
    if agent is None:
        return None

    for key, value in fields.items():
        setattr(agent, key, value)

    db.commit()
    db.refresh(agent)
    logger.info(f"Agent mis à jour: id={agent_id}, champs={sorted(fields)}")
    return agent

def delete_agent(db: Session, agent_id: int) -> None:
    """
    Supprime un agent et son historique d'appels.
    Sans effet si l'agent n'existe pas.
    """
    agent = get_agent(db, agent_id)
    if agent is None:
        logger.debug(f"Suppression ignorée, agent inexistant: id={agent_id}")
        return

    # Les entrées d'historique suivent l'agent (cascade de la relation)
    deleted_logs = len(agent.call_logs)
    db.delete(agent)
    db.commit()
    logger.info(f"Agent supprimé: id={agent_id}, appels supprimés={deleted_logs}")

def list_call_logs(db: Session, agent_id: int) -> List[CallLogEntry]:
    """Récupère l'historique des appels d'un agent, du plus récent au plus ancien"""
    return (
        db.query(CallLogEntry)
        .filter(CallLogEntry.agent_id == agent_id)
        .order_by(CallLogEntry.created_at.desc(), CallLogEntry.id.desc())
        .all()
    )

def create_call_log(db: Session, fields: Dict[str, Any]) -> CallLogEntry:
    """Ajoute une entrée à l'historique des appels"""
    db_log = CallLogEntry(**fields)
    db.add(db_log)
    db.commit()
    db.refresh(db_log)
    return db_log
