from .base import BaseModel
from .deployment import Deployment, DeploymentStatus

__all__ = ["BaseModel", "Deployment", "DeploymentStatus"]
