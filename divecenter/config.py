import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_DEFAULT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    APP_ENV: str = "development"
    SECRET_KEY: str = _DEFAULT_SECRET
    DATABASE_URL: str = "sqlite:///./data/divecenter.db"
    LOG_LEVEL: str = "INFO"
    DEFAULT_DIVE_CENTER: str = "Main Dive Center"
    FIRST_ADMIN_USER: str = "admin"
    FIRST_ADMIN_PASS: str = "admin123"
    # Rental window length used when a Center assignment omits its return date
    DEFAULT_RENTAL_DAYS: int = 1
    BASKET_NUMBER_PREFIX: str = "BASK"

    class Config:
        env_file = ".env"


settings = Settings()

if settings.SECRET_KEY == _DEFAULT_SECRET:
    if settings.APP_ENV == "production":
        raise RuntimeError("SECRET_KEY must be set in production, check the .env file.")
    else:
        logger.warning("SECRET_KEY has its default value, set it in .env before deploying")

if settings.FIRST_ADMIN_PASS == "admin123":
    logger.warning("FIRST_ADMIN_PASS has its default value 'admin123', change it in .env")
