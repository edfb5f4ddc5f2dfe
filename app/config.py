from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import Optional
import os
from pathlib import Path

root_dir = Path(__file__).parent.parent
env_path = root_dir / ".env"
load_dotenv(env_path)

class Settings(BaseSettings):
    # Spheron
    SPHERON_PRIVATE_KEY: str
    SPHERON_NETWORK: str = "testnet"
    SPHERON_GATEWAY_URL: str = "http://localhost:8088"
    SPHERON_TIMEOUT: float = 60.0
    PROVIDER_PROXY_URL: str = "https://provider-proxy.spheron.network"
    ESCROW_TOKEN: str = "CST"

    # Service exposé par le déploiement
    WEBUI_SERVICE_NAME: str = "sd-webui"
    WEBUI_PORT: int = 7860
    REACHABILITY_TIMEOUT: float = 5.0

    # PostgreSQL Database
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "spheron_deployer"

    # Application
    APP_NAME: str = "Spheron Deployer"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    @field_validator("SPHERON_PRIVATE_KEY")
    @classmethod
    def private_key_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SPHERON_PRIVATE_KEY environment variable is required")
        return value.strip()

    # Database URL
    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"
        case_sensitive = True


def masked_environment() -> dict:
    """Variables utiles au diagnostic, secrets et URLs de connexion masqués"""
    visible = {}
    for key, value in os.environ.items():
        if any(prefix in key for prefix in ['SPHERON', 'PROVIDER', 'ESCROW', 'POSTGRES', 'DATABASE', 'APP', 'DEBUG']):
            secret = any(marker in key for marker in ['KEY', 'PASSWORD', 'DATABASE_URL'])
            visible[key] = '*' * min(8, len(value)) if secret else value
    return visible


try:
    print("🔧 Creating Settings instance...")
    settings = Settings()
    print("✅ Settings created successfully!")
    print(f"✅ SPHERON_NETWORK: {settings.SPHERON_NETWORK}")
    print(f"✅ SPHERON_GATEWAY_URL: {settings.SPHERON_GATEWAY_URL}")
    print(f"✅ APP_NAME: {settings.APP_NAME}")
except Exception as e:
    print(f"❌ Settings creation failed: {e}")
    print(f"❌ Available environment variables:")
    for key, value in masked_environment().items():
        print(f"   {key}: {value}")
    raise
