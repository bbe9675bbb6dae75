from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PORTAL_API_URL: str | None = None
    PORTAL_API_TIMEOUT: float = 10.0

    BUSINESS_NAME: str = "Voltride"
    BUSINESS_TIMEZONE: str = "Europe/Madrid"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DEFAULT_LANGUAGE: str = "es"
    SUPPORTED_LANGUAGES: str = "es,en,fr"

    REFUND_WINDOW_HOURS: int = 48

    ASSISTANCE_PHONE: str = "+34655489614"
    ASSISTANCE_PHONE_DISPLAY: str = "655 489 614"

    @property
    def supported_languages(self) -> tuple[str, ...]:
        return tuple(code.strip() for code in self.SUPPORTED_LANGUAGES.split(",") if code.strip())


settings = Settings()
