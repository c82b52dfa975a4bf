from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Klaviyo Flow Builder"
    API_V1_STR: str = "/api/v1"
    CORS_ORIGIN: str = "http://localhost:3000"

    # Klaviyo REST API
    # The private API key is supplied per request and never configured here.
    KLAVIYO_API_BASE_URL: str = "https://a.klaviyo.com"
    KLAVIYO_API_REVISION: str = "2024-10-15"  # Sent as the 'revision' header on every call
    KLAVIYO_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()
