from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.repositories.base_repository import BaseRepository
from app.models.deployment import Deployment


class DeploymentRepository(BaseRepository[Deployment]):
    """Repository pour les demandes de déploiement soumises"""

    def __init__(self, db: Session):
        super().__init__(Deployment, db)

    def create_deployment(self, name: str, yaml_config: str, webui_url: Optional[str] = None) -> Deployment:
        """Enregistre une nouvelle demande de déploiement (statut pending)"""
        return self.create({
            "name": name,
            "yaml_config": yaml_config,
            "webui_url": webui_url,
        })

    def get_recent(self, skip: int = 0, limit: int = 100) -> List[Deployment]:
        """Récupère les déploiements, du plus récent au plus ancien"""
        try:
            return (self.db.query(Deployment)
                    .order_by(Deployment.id.desc())
                    .offset(skip)
                    .limit(limit)
                    .all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
