from pydantic_settings import BaseSettings, SettingsConfigDict

from coursesphere.core.env import load_env

# ENV_FILE must be in os.environ before Settings() is built
load_env()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=None,
        extra="ignore",
        case_sensitive=True,
    )

    # Resource client
    API_BASE_URL: str = "http://localhost:3001"

    # Development backend
    DATA_FILE: str = "./data/data.json"

    # Session persistence
    SESSION_FILE: str = "~/.coursesphere/session.json"
    JWT_SECRET_KEY: str = "coursesphere-dev-secret"
    JWT_ALGORITHM: str = "HS256"

    # "plaintext" compares stored passwords as-is, "pbkdf2_sha256" also accepts hashes
    PASSWORD_SCHEME: str = "plaintext"

    LESSONS_PER_PAGE: int = 5

    LOG_LEVEL: str = "INFO"
    # "json" or "console"
    LOG_FORMAT: str = "json"


settings = Settings()
