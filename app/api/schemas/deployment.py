from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional


class DeploymentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    yaml_config: str = Field(..., alias="yamlConfig", min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("yaml_config")
    @classmethod
    def config_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("yamlConfig must not be blank")
        return value


class DeploymentRecord(BaseModel):
    id: int
    name: str
    yamlConfig: str
    status: str
    webuiUrl: Optional[str] = None
    error: Optional[str] = None
    createdAt: Optional[str] = None


class DeploymentCreatedResponse(BaseModel):
    deployment: DeploymentRecord
    transaction: Dict[str, Any]
    details: Optional[Dict[str, Any]] = None
    lease: Optional[Any] = None


class BalanceResponse(BaseModel):
    lockedBalance: str
    unlockedBalance: str
    token: str


class ReachabilityResponse(BaseModel):
    url: Optional[str] = None
    reachable: bool


class ErrorResponse(BaseModel):
    message: str
    details: Optional[Any] = None
