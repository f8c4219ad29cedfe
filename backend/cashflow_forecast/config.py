from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DB_CONN_STRING: str = ""
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    DEFAULT_HORIZON_DAYS: int = 180
    MAX_HORIZON_DAYS: int = 730

    CRUNCH_PAYMENT_COUNT: int = 3
    CRUNCH_AMOUNT_CENTS: int = 50_000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
