import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # "json" persists to EMPLOYEE_DATA_FILE, "memory" keeps records for the process lifetime
    EMPLOYEE_STORE_BACKEND: str = "json"
    EMPLOYEE_DATA_FILE: str = "data/employees.json"

    UPLOAD_DIR: str = "uploads"
    MAX_IMAGE_SIZE: int = 1024 * 1024

    ORGANIZATION_NAME: str = "Company Organization"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
