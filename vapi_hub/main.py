from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from vapi_hub.core.config import settings
from vapi_hub.db.init_db import create_tables
from vapi_hub.api.routes import api_router
from vapi_hub.services.mock_vapi import MockVapiStore
from vapi_hub.services.vapi_client import RemoteCallFailed

# Configuration du logging
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="API pour la gestion des agents vocaux Vapi et de leurs appels",
    version="0.1.0",
)

# Ressources Vapi simulées, propres à cette application
app.state.mock_vapi_store = MockVapiStore()

# Configuration CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Inclusion des routers API
app.include_router(api_router)

@app.exception_handler(RemoteCallFailed)
async def remote_call_failed_handler(request: Request, exc: RemoteCallFailed):
    """Renvoie les erreurs Vapi avec le message d'origine"""
    logger.warning(f"Appel Vapi en échec sur {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "upstream_status": exc.status_code},
    )

@app.on_event("startup")
async def startup_event():
    """Événement de démarrage de l'application"""
    # Création des tables si elles n'existent pas
    create_tables()
    if settings.vapi_mock_mode:
        logger.warning("Mode simulation Vapi activé, aucun appel réel ne sera passé")
    logger.info("Application started")

@app.on_event("shutdown")
async def shutdown_event():
    """Événement d'arrêt de l'application"""
    logger.info("Application shutdown")

@app.get("/")
async def root():
    """Route racine pour vérifier que l'API est en ligne"""
    return {"message": f"{settings.app_name} is running"}

@app.get("/health")
async def health_check():
    """Route de vérification de santé pour les systèmes de monitoring"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("vapi_hub.main:app", host=settings.host, port=settings.port, reload=settings.debug)
