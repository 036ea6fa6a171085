"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads happen here. No module should call os.getenv()
directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance afterwards. The lifespan in
      api/main.py builds the stores and the TokenService from this object and
      hands them to route handlers through app.state.

  BaseSettings (pydantic-settings): reads values from environment variables
      and an optional .env file. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET).

  @model_validator(mode="after"): resolves the JWT secret once all fields
      are loaded.

Secret policy:
  JWT_SECRET set       -> used as-is; shorter than 32 chars is rejected.
  unset, DEBUG=true    -> random per-process key (tokens die on restart).
  unset, DEBUG=false   -> _INSECURE_DEFAULT_SECRET with a loud warning.
                          Anyone who reads this file can forge tokens for a
                          deployment left in this state.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or content/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("labsite.config")

_REPO_ROOT = Path(__file__).resolve().parent.parent

_INSECURE_DEFAULT_SECRET = "labsite-insecure-default-secret-change-this"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in tests
    without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    database_url: str = f"sqlite:///{_REPO_ROOT / 'labsite.db'}"

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # nosec B104 -- container deployments bind all interfaces
    port: int = 5000
    cors_origins: list[str] = ["*"]
    # Public site served at / by asgi.py when the directory exists.
    static_dir: str = "public"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    jwt_secret: str = ""
    token_expire_seconds: int = 24 * 60 * 60
    bcrypt_rounds: int = 12

    # Set by the validator; lets startup code warn without re-deriving it.
    using_default_secret: bool = False

    @model_validator(mode="after")
    def resolve_jwt_secret(self) -> "Settings":
        """Fill in the JWT secret when JWT_SECRET is not configured."""
        if not self.jwt_secret:
            if self.debug:
                self.jwt_secret = secrets.token_hex(32)
                logger.warning("Using auto-generated JWT_SECRET. Tokens will not survive a restart.")
            else:
                self.jwt_secret = _INSECURE_DEFAULT_SECRET
                self.using_default_secret = True
            return self
        if len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
