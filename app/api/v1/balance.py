from fastapi import APIRouter, Depends
from app.api.schemas.deployment import BalanceResponse, ErrorResponse
from app.services.deployment_service import DeploymentService
from app.dependencies import get_deployment_service

router = APIRouter(prefix="/balance", tags=["balance"])


@router.get("", response_model=BalanceResponse, responses={500: {"model": ErrorResponse}})
def get_balance(
        deployment_service: DeploymentService = Depends(get_deployment_service)
):
    """Solde escrow (verrouillé / disponible) de l'utilisateur"""
    return deployment_service.get_balance()
