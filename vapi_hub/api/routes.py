from fastapi import APIRouter
from vapi_hub.api import agents, call_logs, calls, health, remote

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(remote.router, prefix="/agents/{agent_id}/remote", tags=["vapi"])
api_router.include_router(call_logs.router, prefix="/call-logs", tags=["call-logs"])
api_router.include_router(calls.router, prefix="/calls", tags=["calls"])
