import os

# Doit être défini avant l'import de app.config
os.environ.setdefault("SPHERON_PRIVATE_KEY", "0x" + "11" * 32)
os.environ["DATABASE_URL"] = "sqlite://"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.dependencies import get_spheron_client
from app.main import app
from app.models import Deployment  # noqa: F401  (enregistre la table)
from app.repositories.deployment_repository import DeploymentRepository
from app.services.deployment_service import DeploymentService

LEASE_ID = "4242"
PROVIDER_PROXY_URL = "https://provider-proxy.test"


class FakeSpheronClient:
    """Double du client Spheron: réponses configurables, appels enregistrés"""

    def __init__(self):
        self.calls = []
        self.failures = {}
        self.balance = {"lockedBalance": "10", "unlockedBalance": "250.5", "token": "CST"}
        self.transaction = {"leaseId": LEASE_ID, "transaction": {"hash": "0xabc"}}
        self.deployment_details = {
            "status": "active",
            "services": {"sd-webui": {"ready_replicas": 1}},
            "forwarded_ports": {
                "sd-webui": [
                    {"port": 8888, "externalPort": 31888, "proto": "TCP", "name": "sd-webui", "host": "provider.example.com"},
                    {"port": 7860, "externalPort": 31860, "proto": "TCP", "name": "sd-webui", "host": "provider.example.com"},
                ]
            },
        }
        self.lease_details = {"leaseId": LEASE_ID, "state": "ACTIVE"}
        self.lease_status = {
            "provider": "0xprovider",
            "pricePerHour": 12,
            "startTime": "2026-10-18T10:00:00Z",
            "remainingTime": "1h",
        }
        self.logs = ["Starting Stable Diffusion WebUI..."]

        self.escrow = SimpleNamespace(
            get_user_balance=self._handler("get_user_balance", lambda token: self.balance)
        )
        self.deployment = SimpleNamespace(
            create_deployment=self._handler("create_deployment", lambda sdl, proxy: self.transaction),
            get_deployment=self._handler("get_deployment", lambda lease_id, proxy: self.deployment_details),
            get_deployment_logs=self._handler(
                "get_deployment_logs", lambda lease_id, proxy, tail=100, startup=True: self.logs
            ),
        )
        self.leases = SimpleNamespace(
            get_lease_details=self._handler("get_lease_details", lambda lease_id: self.lease_details),
            get_lease_status_by_lease_id=self._handler(
                "get_lease_status_by_lease_id", lambda lease_id: self.lease_status
            ),
        )

    def _handler(self, name, response):
        def call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            if name in self.failures:
                raise self.failures[name]
            return response(*args, **kwargs)
        return call

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def fake_spheron():
    return FakeSpheronClient()


@pytest.fixture
def deployment_repository(db_session):
    return DeploymentRepository(db_session)


@pytest.fixture
def deployment_service(fake_spheron, deployment_repository):
    return DeploymentService(
        spheron_client=fake_spheron,
        deployment_repository=deployment_repository,
        provider_proxy_url=PROVIDER_PROXY_URL,
    )


@pytest.fixture
def client(db_session, fake_spheron):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_spheron_client] = lambda: fake_spheron
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
