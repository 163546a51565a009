from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Tenant Intake API"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3005

    database_url: str = "sqlite+aiosqlite:///./tenant_intake.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Snapshots of applications, properties and reports land here
    archive_dir: str = "./archive"
    default_currency: str = "GBP"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
