from sqlalchemy import Column, String, Text
from .base import BaseModel


class DeploymentStatus:
    PENDING = "pending"


class Deployment(BaseModel):
    __tablename__ = "deployments"

    name = Column(Text, nullable=False)

    # SDL transmis tel quel à Spheron
    yaml_config = Column(Text, nullable=False)

    # Statut
    status = Column(String(50), nullable=False, default=DeploymentStatus.PENDING,
                    server_default=DeploymentStatus.PENDING)
    webui_url = Column(Text, nullable=True)
    error = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Deployment(id={self.id}, name='{self.name}', status='{self.status}')>"

    def to_dict(self):
        """Convertit le modèle en dictionnaire (clés camelCase attendues par le client)"""
        return {
            "id": self.id,
            "name": self.name,
            "yamlConfig": self.yaml_config,
            "status": self.status,
            "webuiUrl": self.webui_url,
            "error": self.error,
            "createdAt": self.created_at.isoformat() if self.created_at else None
        }
