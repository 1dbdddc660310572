from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

    # --- General ---
    PROJECT_NAME: str = "Catalog Variant Service"
    API_PREFIX: str = "/api/v1"
    ENVIRONMENT: str = Field("stage", validation_alias="ENV", alias_priority=2)
    LOG_LEVEL: str = "INFO"

    # --- Media picker ---
    MEDIA_MAX_SELECTION: int = Field(10, ge=1)
    DEFAULT_MEDIA_TYPE: str = "image"

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('API_PREFIX')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        # Routers append their own leading slash
        return v.rstrip("/")


# Instantiate
settings = Settings()

# Debug print in development
if settings.ENVIRONMENT == "development":
    print("--- Loaded Application Settings ---")
    for k, v in settings.model_dump().items():
        print(f"{k}: {v}")
    print("--- End Application Settings ---")
