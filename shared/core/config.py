import os
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    # Odoo JSON-RPC
    ODOO_URL: str = os.getenv("ODOO_URL", "")
    ODOO_DB: str = os.getenv("ODOO_DB", "")
    ODOO_USER: str = os.getenv("ODOO_USER", "")
    ODOO_API: str = os.getenv("ODOO_API", "")
    ODOO_FETCH_LIMIT: int = int(os.getenv("ODOO_FETCH_LIMIT", 2000))
    ODOO_TIMEOUT_SECONDS: float = float(os.getenv("ODOO_TIMEOUT_SECONDS", 60))

    # comma separated
    ALLOWED_ORIGINS: str = os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class OdooConfig(BaseModel):
    url: str
    db: str
    user: str
    api_key: str
    fetch_limit: int = 2000
    timeout: float = 60

    model_config = {"frozen": True}

    def is_complete(self) -> bool:
        return all([self.url, self.db, self.user, self.api_key])


settings = Settings()

ODOO_CONFIG = OdooConfig(
    url=settings.ODOO_URL.rstrip("/"),
    db=settings.ODOO_DB,
    user=settings.ODOO_USER,
    api_key=settings.ODOO_API,
    fetch_limit=settings.ODOO_FETCH_LIMIT,
    timeout=settings.ODOO_TIMEOUT_SECONDS,
)
