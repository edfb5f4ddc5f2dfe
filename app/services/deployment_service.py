from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timezone
import logging

from app.core.exceptions import (
    DeploymentCreationError,
    DeploymentNotFoundError,
    EscrowBalanceError,
    InsufficientBalanceError,
)
from app.core.serialization import parse_balance, sanitize_response, to_decimal_string
from app.external.service_probe import is_reachable
from app.external.spheron_client import SpheronClient, SpheronClientError
from app.models.deployment import Deployment
from app.repositories.deployment_repository import DeploymentRepository

logger = logging.getLogger(__name__)


def extract_service_url(details: Optional[Dict[str, Any]], service_name: str, port: int) -> Optional[str]:
    """Construit l'URL publique d'un service à partir de ses ports redirigés"""
    if not isinstance(details, dict):
        return None

    forwarded_ports = details.get("forwarded_ports") or {}
    if not isinstance(forwarded_ports, dict):
        return None

    for entry in forwarded_ports.get(service_name) or []:
        if not isinstance(entry, dict):
            continue
        try:
            entry_port = int(entry.get("port"))
        except (TypeError, ValueError):
            continue
        external_port = entry.get("externalPort", entry.get("external_port"))
        host = entry.get("host")
        if entry_port == port and host and external_port is not None:
            return f"http://{host}:{external_port}"

    return None


class DeploymentService:
    def __init__(
            self,
            spheron_client: SpheronClient,
            deployment_repository: DeploymentRepository,
            provider_proxy_url: str,
            escrow_token: str = "CST",
            webui_service_name: str = "sd-webui",
            webui_port: int = 7860,
            reachability_timeout: float = 5.0
    ):
        self.spheron_client = spheron_client
        self.deployment_repository = deployment_repository
        self.provider_proxy_url = provider_proxy_url
        self.escrow_token = escrow_token
        self.webui_service_name = webui_service_name
        self.webui_port = webui_port
        self.reachability_timeout = reachability_timeout

    # === SOLDE ===
    def get_balance(self) -> Dict[str, str]:
        """Solde escrow, montants en chaînes décimales"""
        try:
            balance = self.spheron_client.escrow.get_user_balance(self.escrow_token)
        except SpheronClientError as e:
            logger.error(f"Erreur lors de la récupération du solde escrow: {e}")
            raise EscrowBalanceError(str(e), details=e.body)

        if balance is None:
            balance = {}
        if not isinstance(balance, dict):
            logger.error(f"Réponse de solde inattendue: {balance!r}")
            raise EscrowBalanceError("Unexpected escrow balance payload", details=sanitize_response(balance))

        try:
            return {
                "lockedBalance": to_decimal_string(balance.get("lockedBalance")),
                "unlockedBalance": to_decimal_string(balance.get("unlockedBalance")),
                "token": str(balance.get("token") or self.escrow_token),
            }
        except TypeError as e:
            raise EscrowBalanceError(f"Invalid escrow balance: {e}", details=sanitize_response(balance))

    # === CRÉATION ===
    def create_deployment(self, name: str, yaml_config: str) -> Dict[str, Any]:
        """
        Crée un déploiement Spheron puis enregistre la demande.

        Le solde est vérifié avant toute création. Les appels secondaires
        (détails, bail, statut, logs) sont tentés un par un; un échec est
        journalisé et la réponse omet simplement la donnée correspondante.
        """
        logger.info(f"Demande de déploiement reçue: name={name!r}, config={len(yaml_config)} caractères")

        self._ensure_sufficient_balance()

        logger.info("Création du déploiement avec la configuration YAML...")
        try:
            transaction = self.spheron_client.deployment.create_deployment(yaml_config, self.provider_proxy_url)
        except SpheronClientError as e:
            logger.error(f"Erreur lors de la création du déploiement: {e}")
            raise DeploymentCreationError(str(e), details=e.body)
        logger.info(f"Transaction de déploiement: {transaction}")

        transaction = transaction or {}
        details, lease = None, None
        lease_id = transaction.get("leaseId") if isinstance(transaction, dict) else None
        if lease_id:
            details, lease = self._collect_details(str(lease_id))

        webui_url = extract_service_url(details, self.webui_service_name, self.webui_port)
        stored = self.deployment_repository.create_deployment(name, yaml_config, webui_url=webui_url)
        logger.info(f"Déploiement {stored.id} enregistré (lease {lease_id})")

        return sanitize_response({
            "deployment": stored.to_dict(),
            "transaction": transaction,
            "details": details,
            "lease": lease,
        })

    def _ensure_sufficient_balance(self):
        try:
            balance = self.spheron_client.escrow.get_user_balance(self.escrow_token)
        except SpheronClientError as e:
            logger.error(f"Erreur lors de la vérification du solde: {e}")
            raise EscrowBalanceError(str(e), details=e.body)

        logger.info(f"Solde actuel: {balance}")
        if not isinstance(balance, dict) or parse_balance(balance.get("unlockedBalance")) <= 0:
            raise InsufficientBalanceError(f"Insufficient {self.escrow_token} balance in escrow")

    def _attempt(self, label: str, call: Callable, *args, **kwargs) -> Any:
        try:
            return call(*args, **kwargs)
        except Exception as e:
            logger.warning(f"Échec de la récupération ({label}), on continue sans: {e}")
            return None

    def _collect_details(self, lease_id: str):
        proxy = self.provider_proxy_url
        deployment_details = self._attempt("détails du déploiement", self.spheron_client.deployment.get_deployment,
                                           lease_id, proxy)
        lease_details = self._attempt("détails du bail", self.spheron_client.leases.get_lease_details, lease_id)
        lease_status = self._attempt("statut du bail", self.spheron_client.leases.get_lease_status_by_lease_id,
                                     lease_id)
        logs = self._attempt("logs", self.spheron_client.deployment.get_deployment_logs,
                             lease_id, proxy, tail=100, startup=True)

        if deployment_details is None and lease_status is None and logs is None:
            return None, lease_details

        deployment_details = deployment_details if isinstance(deployment_details, dict) else {}
        lease_status = lease_status if isinstance(lease_status, dict) else {}
        price = lease_status.get("pricePerHour")

        details = {
            **deployment_details,
            "provider": lease_status.get("provider") or "",
            "pricePerHour": to_decimal_string(price) if price not in (None, "") else "0",
            "startTime": lease_status.get("startTime") or datetime.now(timezone.utc).isoformat(),
            "remainingTime": lease_status.get("remainingTime") or "",
            "services": deployment_details.get("services") or {},
            "logs": logs if logs is not None else [],
        }
        return details, lease_details

    # === CONSULTATION ===
    def list_deployments(self, skip: int = 0, limit: int = 100) -> List[Dict[str, Any]]:
        return [d.to_dict() for d in self.deployment_repository.get_recent(skip, limit)]

    def get_deployment(self, deployment_id: int) -> Deployment:
        deployment = self.deployment_repository.get_by_id(deployment_id)
        if deployment is None:
            raise DeploymentNotFoundError(f"Deployment {deployment_id} not found")
        return deployment

    def check_reachability(self, deployment_id: int) -> Dict[str, Any]:
        """Sonde une fois l'URL du service enregistrée pour ce déploiement"""
        deployment = self.get_deployment(deployment_id)
        if not deployment.webui_url:
            return {"url": None, "reachable": False}
        return {
            "url": deployment.webui_url,
            "reachable": is_reachable(deployment.webui_url, self.reachability_timeout),
        }
