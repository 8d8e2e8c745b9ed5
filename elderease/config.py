from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "data/elderease.db"
    host: str = "0.0.0.0"
    port: int = 3005
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    seed_file: str | None = None
    cors_origins: list[str] = ["*"]
    collections: list[str] = ["tasks", "users", "messages", "notifications"]
    rate_limit_create: str = "60/minute"
    rate_limit_message: str = "120/minute"
    rate_limit_upload: str = "20/minute"

    model_config = {"env_prefix": "ELDEREASE_"}


settings = Settings()
