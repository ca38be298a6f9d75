from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "GF_", "env_file": ".env", "env_file_encoding": "utf-8"}

    db_path: str = Field(default="guideflow.db")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    cors_origins: str = Field(default="http://localhost:3000")
    max_import_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    def get_cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
