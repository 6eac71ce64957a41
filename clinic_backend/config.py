# clinic_backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== App =====
    APP_NAME: str = "clinic_backend"
    ENV: str = "dev"
    # TZ local de la clínica (las citas se guardan como hora local "naive")
    TIMEZONE: str = "America/Mexico_City"

    # ===== DB =====
    # En producción define DATABASE_URL con tu Postgres. Local cae a SQLite.
    DATABASE_URL: str = "sqlite:///./clinic.db"

    # Opciones de pool (solo aplican fuera de SQLite)
    DB_POOL_SIZE: int = 2
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 min

    # ===== Citas =====
    # Rechaza reservas/reprogramaciones con hora en el pasado
    REQUIRE_FUTURE_APPOINTMENTS: bool = True

    # ===== Admin =====
    ADMIN_TOKEN: Optional[str] = None

    def model_post_init(self, __context) -> None:
        """
        Normaliza valores que suelen llegar con espacios desde el panel de env.
        """
        self.TIMEZONE = (self.TIMEZONE or "").strip() or "America/Mexico_City"
        if self.ADMIN_TOKEN is not None:
            self.ADMIN_TOKEN = self.ADMIN_TOKEN.strip() or None


settings = Settings()
