from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = (
        "http://localhost:5173,"
        "https://spc-travel-journal-frontend-7le5tey4h-spacers-projects-ce95e77e.vercel.app"
    )

    # Database
    DATABASE_URL: str = ""
    SQL_ECHO: bool = False

    # Media host
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "travel-journal-app"
    UPLOAD_TIMEOUT_SECONDS: float | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def split_csv(raw_value: str, fallback: list[str] | None = None) -> list[str]:
    items = [item.strip() for item in (raw_value or "").split(",") if item.strip()]
    return items or list(fallback or [])


settings = Settings()
