from pydantic import Field
from pydantic_settings import SettingsConfigDict

from configs.deploy import DeploymentConfig
from configs.exchange import ExchangeConfig
from configs.feature import FeatureConfig
from configs.packaging import PackagingInfo


class AppConfig(ExchangeConfig, FeatureConfig, PackagingInfo, DeploymentConfig):
    PROJECT_NAME: str = Field(default="http-exchange")

    model_config = SettingsConfigDict(
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


app_config: AppConfig = AppConfig()

__all__ = ["app_config"]
