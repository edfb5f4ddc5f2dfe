from functools import lru_cache
from sqlalchemy.orm import Session
from fastapi import Depends

from app.config import settings
from app.core.database import get_db
from app.external.spheron_client import SpheronClient
from app.repositories.deployment_repository import DeploymentRepository
from app.services.deployment_service import DeploymentService


# === CLIENTS EXTERNES ===
@lru_cache()
def get_spheron_client() -> SpheronClient:
    return SpheronClient(
        network=settings.SPHERON_NETWORK,
        private_key=settings.SPHERON_PRIVATE_KEY,
        base_url=settings.SPHERON_GATEWAY_URL,
        timeout=settings.SPHERON_TIMEOUT
    )


# === REPOSITORIES ===
def get_deployment_repository(db: Session = Depends(get_db)) -> DeploymentRepository:
    """Factory pour le repository des déploiements"""
    return DeploymentRepository(db)


# === SERVICES ===
def get_deployment_service(
        spheron_client: SpheronClient = Depends(get_spheron_client),
        deployment_repo: DeploymentRepository = Depends(get_deployment_repository)
) -> DeploymentService:
    """Factory pour le service de déploiement"""
    return DeploymentService(
        spheron_client=spheron_client,
        deployment_repository=deployment_repo,
        provider_proxy_url=settings.PROVIDER_PROXY_URL,
        escrow_token=settings.ESCROW_TOKEN,
        webui_service_name=settings.WEBUI_SERVICE_NAME,
        webui_port=settings.WEBUI_PORT,
        reachability_timeout=settings.REACHABILITY_TIMEOUT
    )
