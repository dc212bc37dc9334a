from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings


class DeployEnv(StrEnum):
    DEVELOPMENT = "DEVELOPMENT"
    TESTING = "TESTING"
    PRODUCTION = "PRODUCTION"


class DeploymentConfig(BaseSettings):
    """
    Deployment environment settings
    """

    DEPLOY_ENV: DeployEnv = Field(
        description="Deployment environment. Decoder diagnostics are silenced in PRODUCTION.",
        default=DeployEnv.DEVELOPMENT,
    )

    DEBUG: bool = Field(
        description="Enable debug mode",
        default=False,
    )

    @property
    def is_production(self) -> bool:
        return self.DEPLOY_ENV == DeployEnv.PRODUCTION
