import logging

import requests

logger = logging.getLogger(__name__)


def is_reachable(url: str, timeout: float = 5.0) -> bool:
    """Vérifie si le service exposé répond sur son port redirigé"""
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug(f"Service {url} pas encore joignable: {e}")
        return False

    # Un 5xx vient en général du proxy devant un service pas encore démarré
    return response.status_code < 500
