from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "development"  # development | production | test
    APP_NAME: str = "devcamper-api"

    DATABASE_URL: str

    JWT_SECRET: str = "change_me_jwt"
    JWT_EXPIRE_DAYS: int = 30
    JWT_COOKIE_EXPIRE_DAYS: int = 30
    TOKEN_COOKIE_NAME: str = "token"
    RESET_TOKEN_TTL_MINUTES: int = 10

    CORS_ORIGINS: str = "http://localhost:3000"

    EMAIL_PROVIDER: str = "dummy"  # dummy | smtp
    SMTP_HOST: str = ""
    SMTP_PORT: int = 2525
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    FROM_NAME: str = "DevCamper"
    FROM_EMAIL: str = "noreply@devcamper.io"

    GEOCODER_PROVIDER: str = "dummy"  # dummy | mapquest
    GEOCODER_URL: str = "https://www.mapquestapi.com/geocoding/v1/address"
    GEOCODER_API_KEY: str = ""
    GEOCODER_TIMEOUT_SECONDS: float = 10.0

    FILE_UPLOAD_PATH: str = "./public/uploads"
    MAX_FILE_UPLOAD_BYTES: int = 1_000_000

    ADVANCED_RESULTS_DEFAULT_LIMIT: int = 100

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"

settings = Settings()
