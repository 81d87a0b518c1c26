import os
from functools import lru_cache
from pathlib import Path

# Prefer loading environment variables from a .env file if python-dotenv is available
try:
    from dotenv import load_dotenv, find_dotenv
    _env_path = find_dotenv(usecwd=True)
    if _env_path:
        load_dotenv(_env_path, override=False)
except ImportError:
    pass

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_secret")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # Default to one day, matching the lifetime of a WordPress REST nonce
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(24 * 60)))
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", str(BASE_DIR / "media"))
    ADMIN_URL: str = os.getenv("ADMIN_URL", "/admin/")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Editor account created on first start (see services.user_setup)
    PROVISION_TEST_USER: bool = bool(int(os.getenv("PROVISION_TEST_USER", "1")))
    TEST_USER_LOGIN: str = os.getenv("TEST_USER_LOGIN", "wp-test")
    TEST_USER_EMAIL: str = os.getenv("TEST_USER_EMAIL", "wptest@elementor.com")
    TEST_USER_PASSWORD: str = os.getenv("TEST_USER_PASSWORD", "123456789")


@lru_cache
def get_settings():
    return Settings()
