from pydantic import Field, NonNegativeInt, PositiveInt
from pydantic_settings import BaseSettings


class ExchangeConfig(BaseSettings):
    """
    Engine-wide bounds for HTTP exchanges
    """

    HTTP_EXCHANGE_TIMEOUT_MS: NonNegativeInt = Field(
        description="Default silence timeout in milliseconds for connect and data-idle timers, 0 disables",
        default=30000,
    )

    HTTP_EXCHANGE_MAX_REDIRECTS: NonNegativeInt = Field(
        description="Maximum number of redirect hops followed for a single request",
        default=20,
    )

    HTTP_EXCHANGE_USER_AGENT: str | None = Field(
        description="User-Agent header added by the scheduler when a request does not carry one",
        default=None,
    )

    SCHEDULER_CONCURRENCY: PositiveInt = Field(
        description="Maximum number of transactions a scheduler keeps in flight",
        default=10,
    )
