# Settings come from the environment; a .env file is loaded first.
import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from keygen_app.crypto_utils import MIN_KEY_BYTES

DEFAULT_VERIFICATION_TOKEN = "YOUR_LINKVERTISE_TOKEN"
DEFAULT_KEY_SALT = "CHANGE_ME_SALT"
DEFAULT_ADMIN_KEY = "admin-secret"
DEFAULT_LINKVERTISE_API_URL = "https://publisher.linkvertise.com/api/v1/anti_bypassing"
DEFAULT_VERIFY_TIMEOUT = 10.0
DEFAULT_PORT = 8080


class ConfigError(ValueError):
    """Raised when an environment value cannot be used."""


def _get_env(key: str, default: str, fallback_key: Optional[str] = None) -> str:
    value = os.environ.get(key)
    if not value and fallback_key:
        value = os.environ.get(fallback_key)
    return value or default


def _get_number_env(key: str, default, cast):
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    verification_token: str = DEFAULT_VERIFICATION_TOKEN
    key_salt: str = DEFAULT_KEY_SALT
    admin_key: str = DEFAULT_ADMIN_KEY
    linkvertise_api_url: str = DEFAULT_LINKVERTISE_API_URL
    verify_timeout: float = DEFAULT_VERIFY_TIMEOUT
    key_bytes: int = MIN_KEY_BYTES
    log_level: str = "INFO"
    environment: str = "production"
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if not math.isfinite(self.verify_timeout) or self.verify_timeout <= 0:
            raise ConfigError(f"VERIFY_TIMEOUT must be a positive finite number, got {self.verify_timeout}")
        if self.key_bytes < MIN_KEY_BYTES:
            raise ConfigError(f"KEY_BYTES must be at least {MIN_KEY_BYTES}, got {self.key_bytes}")
        if not self.key_salt:
            raise ConfigError("KEY_SALT must not be empty")
        if not self.admin_key:
            raise ConfigError("ADMIN_KEY must not be empty")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            verification_token=_get_env("VERIFICATION_TOKEN", DEFAULT_VERIFICATION_TOKEN, "LINKVERTISE_TOKEN"),
            key_salt=_get_env("KEY_SALT", DEFAULT_KEY_SALT),
            admin_key=_get_env("ADMIN_KEY", DEFAULT_ADMIN_KEY),
            linkvertise_api_url=_get_env("LINKVERTISE_API_URL", DEFAULT_LINKVERTISE_API_URL),
            verify_timeout=_get_number_env("VERIFY_TIMEOUT", DEFAULT_VERIFY_TIMEOUT, float),
            key_bytes=_get_number_env("KEY_BYTES", MIN_KEY_BYTES, int),
            log_level=_get_env("LOG_LEVEL", "INFO").upper(),
            environment=_get_env("APP_ENV", "production").lower(),
            port=_get_number_env("PORT", DEFAULT_PORT, int),
        )

    def insecure_defaults(self) -> list:
        """Names of secret settings still at their shipped default."""
        names = []
        if self.verification_token == DEFAULT_VERIFICATION_TOKEN:
            names.append("VERIFICATION_TOKEN")
        if self.key_salt == DEFAULT_KEY_SALT:
            names.append("KEY_SALT")
        if self.admin_key == DEFAULT_ADMIN_KEY:
            names.append("ADMIN_KEY")
        return names
