"""Wishlist Configuration - environment driven settings."""

from functools import lru_cache

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Signing keys shorter than this are accepted but reported at startup
MIN_RECOMMENDED_KEY_BYTES = 32


class ConfigurationError(Exception):
    """Required configuration is missing or invalid.

    Raised at startup so the process refuses to serve with a broken setup.
    """

    def __init__(self, message: str, keys: list[str] | None = None):
        super().__init__(message)
        self.keys = keys or []


def _require_non_blank(value: str, key: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"'{key}' is required and must not be blank")
    return value


class JwtSettings(BaseModel):
    """Bearer token settings (Jwt:*)."""

    key: str
    issuer: str
    audience: str
    expiration_minutes: int = Field(default=60, gt=0)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        return _require_non_blank(v, "Jwt:Key")

    @field_validator("issuer")
    @classmethod
    def validate_issuer(cls, v: str) -> str:
        return _require_non_blank(v, "Jwt:Issuer")

    @field_validator("audience")
    @classmethod
    def validate_audience(cls, v: str) -> str:
        return _require_non_blank(v, "Jwt:Audience")


class ConnectionStrings(BaseModel):
    """Database connection strings (ConnectionStrings:*)."""

    default_connection: str

    @field_validator("default_connection")
    @classmethod
    def validate_default_connection(cls, v: str) -> str:
        return _require_non_blank(v, "ConnectionStrings:DefaultConnection")


class CorsSettings(BaseModel):
    """Cross-origin settings (Cors:*). Empty means no cross-origin access."""

    allowed_origins: list[str] = Field(default_factory=list)

    @field_validator("allowed_origins")
    @classmethod
    def strip_origins(cls, v: list[str]) -> list[str]:
        return [origin.strip() for origin in v if origin and origin.strip()]


class AdminBootstrap(BaseModel):
    """Optional administrator account created at startup."""

    name: str | None = None
    password: str | None = None

    @model_validator(mode="after")
    def validate_pair(self) -> "AdminBootstrap":
        if bool(self.name) != bool(self.password):
            raise ValueError("ADMIN__NAME and ADMIN__PASSWORD must be set together")
        return self

    @property
    def enabled(self) -> bool:
        return bool(self.name and self.password)


class Settings(BaseSettings):
    """Application settings.

    Nested keys use ``__`` in the environment, e.g. ``JWT__KEY`` for
    ``Jwt:Key`` and ``CONNECTION_STRINGS__DEFAULT_CONNECTION`` for
    ``ConnectionStrings:DefaultConnection``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application
    app_name: str = "Wishlist"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Required sections
    jwt: JwtSettings
    connection_strings: ConnectionStrings

    # Optional sections
    cors: CorsSettings = Field(default_factory=CorsSettings)
    admin: AdminBootstrap = Field(default_factory=AdminBootstrap)

    # Token blacklist sweep cadence
    blacklist_sweep_interval_minutes: int = Field(default=60, gt=0)

    # Database pool (ignored for SQLite)
    db_pool_size: int = Field(default=20, ge=1)
    db_max_overflow: int = Field(default=20, ge=0)
    db_pool_timeout: int = Field(default=30, ge=1)
    db_pool_recycle: int = Field(default=1800, ge=1)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def database_url(self) -> str:
        return self.connection_strings.default_connection

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def blacklist_sweep_interval_seconds(self) -> float:
        return float(self.blacklist_sweep_interval_minutes * 60)

    def check_security_configuration(self) -> list[str]:
        """Return non-fatal warnings about the current configuration."""
        warnings = []
        if len(self.jwt.key.encode("utf-8")) < MIN_RECOMMENDED_KEY_BYTES:
            warnings.append(
                f"Jwt:Key is shorter than {MIN_RECOMMENDED_KEY_BYTES} bytes; "
                "use a longer random secret for HS256 signing"
            )
        if self.debug:
            warnings.append("DEBUG is enabled; API docs are publicly reachable")
        return warnings


def load_settings(**overrides) -> Settings:
    """Read and validate settings, raising ConfigurationError on any problem."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        keys = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid configuration ({', '.join(keys)}): {e}",
            keys=keys,
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return load_settings()


settings = get_settings()
