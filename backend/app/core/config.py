from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./subtrack.db"

    # Site
    SITE_NAME: str = "SubTrack"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Jobs: shared secret for the HTTP trigger (empty disables it)
    CRON_SECRET: str = ""

    # Scheduler
    SCHEDULER_TIMEZONE: str = "UTC"
    SCHEDULER_RENEWAL_HOUR: int = 0
    SCHEDULER_RENEWAL_MINUTE: int = 0
    RENEWAL_BATCH_SIZE: int = 100

    # Environment
    ENV: str = "development"
    DEBUG: bool = True

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
