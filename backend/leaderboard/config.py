import os
from pydantic import BaseModel

class Settings(BaseModel):
    DB_URL: str = os.getenv(
        "DB_URL",
        "postgresql+psycopg2://watchtime:watchtime@db:5432/watchtime"
    )
    TABLE_NAME: str = os.getenv("TABLE_NAME", "time_records")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
