import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class SpheronClientError(Exception):
    """Échec d'un appel à la passerelle Spheron (transport ou réponse HTTP en erreur)"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class _Transport:
    """Session HTTP partagée par les différents espaces de l'API"""

    def __init__(self, base_url: str, private_key: str, network: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.network = network
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {private_key}",
            "X-Spheron-Network": network,
            "Accept": "application/json",
        })

    def request(self, method: str, path: str, params: Optional[Dict] = None,
                json: Optional[Dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Erreur réseau vers la passerelle Spheron ({method} {path}): {e}")
            raise SpheronClientError(f"Spheron gateway unreachable: {e}") from e

        if response.status_code >= 400:
            body = self._error_body(response)
            logger.error(f"Erreur HTTP {response.status_code} de la passerelle Spheron ({method} {path}): {body}")
            message = body.get("message") if isinstance(body, dict) and body.get("message") else response.reason
            raise SpheronClientError(str(message), status_code=response.status_code, body=body)

        if not response.content:
            return None

        try:
            # Decimal pour ne rien perdre sur les montants
            return response.json(parse_float=Decimal)
        except ValueError as e:
            raise SpheronClientError(f"Invalid JSON from Spheron gateway: {e}",
                                     status_code=response.status_code, body=response.text) from e

    @staticmethod
    def _error_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def close(self):
        self.session.close()


class EscrowApi:
    def __init__(self, transport: _Transport):
        self._transport = transport

    def get_user_balance(self, token: str) -> Optional[Dict[str, Any]]:
        """Solde escrow de l'utilisateur pour un token ({lockedBalance, unlockedBalance, token})"""
        return self._transport.request("GET", "/escrow/balance", params={"token": token})


class DeploymentApi:
    def __init__(self, transport: _Transport):
        self._transport = transport

    def create_deployment(self, sdl: str, provider_proxy_url: str) -> Dict[str, Any]:
        """Crée un déploiement à partir du SDL; renvoie la transaction (leaseId, transaction...)"""
        return self._transport.request("POST", "/deployments", json={
            "sdl": sdl,
            "providerProxyUrl": provider_proxy_url,
        })

    def get_deployment(self, lease_id: str, provider_proxy_url: str) -> Optional[Dict[str, Any]]:
        return self._transport.request("GET", f"/deployments/{lease_id}",
                                       params={"providerProxyUrl": provider_proxy_url})

    def get_deployment_logs(self, lease_id: str, provider_proxy_url: str,
                            tail: int = 100, startup: bool = True) -> List[Any]:
        return self._transport.request("GET", f"/deployments/{lease_id}/logs", params={
            "providerProxyUrl": provider_proxy_url,
            "tail": tail,
            "startup": str(startup).lower(),
        })


class LeasesApi:
    def __init__(self, transport: _Transport):
        self._transport = transport

    def get_lease_details(self, lease_id: str) -> Optional[Dict[str, Any]]:
        return self._transport.request("GET", f"/leases/{lease_id}")

    def get_lease_status_by_lease_id(self, lease_id: str) -> Optional[Dict[str, Any]]:
        return self._transport.request("GET", f"/leases/{lease_id}/status")


class SpheronClient:
    """Client de la marketplace Spheron, organisé comme le SDK (escrow, deployment, leases)"""

    def __init__(self, network: str, private_key: str, base_url: str, timeout: float = 60.0):
        if not private_key:
            raise ValueError("SPHERON_PRIVATE_KEY environment variable is required")

        self.network = network
        self._transport = _Transport(base_url, private_key, network, timeout)
        self.escrow = EscrowApi(self._transport)
        self.deployment = DeploymentApi(self._transport)
        self.leases = LeasesApi(self._transport)
        logger.info(f"Client Spheron initialisé (réseau {network}, passerelle {self._transport.base_url})")

    def close(self):
        self._transport.close()
