from fastapi import APIRouter, Depends, Query
from typing import List
from app.api.schemas.deployment import (
    DeploymentCreate,
    DeploymentCreatedResponse,
    DeploymentRecord,
    ErrorResponse,
    ReachabilityResponse
)
from app.services.deployment_service import DeploymentService
from app.dependencies import get_deployment_service

router = APIRouter(prefix="/deployments", tags=["deployments"])

_errors = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("", response_model=DeploymentCreatedResponse, responses=_errors)
def create_deployment(
        payload: DeploymentCreate,
        deployment_service: DeploymentService = Depends(get_deployment_service)
):
    """Crée un déploiement Spheron et renvoie transaction, détails et bail"""
    return deployment_service.create_deployment(payload.name, payload.yaml_config)


@router.get("", response_model=List[DeploymentRecord])
def list_deployments(
        skip: int = Query(0, ge=0),
        limit: int = Query(100, ge=1, le=500),
        deployment_service: DeploymentService = Depends(get_deployment_service)
):
    """Liste les déploiements enregistrés, du plus récent au plus ancien"""
    return deployment_service.list_deployments(skip, limit)


@router.get("/{deployment_id}", response_model=DeploymentRecord, responses={404: {"model": ErrorResponse}})
def get_deployment(
        deployment_id: int,
        deployment_service: DeploymentService = Depends(get_deployment_service)
):
    return deployment_service.get_deployment(deployment_id).to_dict()


@router.get("/{deployment_id}/reachability", response_model=ReachabilityResponse,
            responses={404: {"model": ErrorResponse}})
def get_deployment_reachability(
        deployment_id: int,
        deployment_service: DeploymentService = Depends(get_deployment_service)
):
    """Indique si le service exposé par le déploiement répond déjà"""
    return deployment_service.check_reachability(deployment_id)
