"""Settings for the parking admin tool.

Values are resolved in this order, later sources winning:

1. Field defaults below
2. ``PARKING_ADMIN_*`` environment variables (and ``.env``)
3. A YAML or TOML file passed with ``--config``
4. CLI flags such as ``--log-level``

Invalid values fail at startup with a pydantic ``ValidationError``.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_CONFIG_SUFFIXES = (".yaml", ".yml", ".toml")


class Settings(BaseSettings):
    """Admin tool configuration.

    Example:
        settings = Settings()
        settings = Settings(api_base_url="https://parking.example.com/api")
    """

    model_config = SettingsConfigDict(
        env_prefix="PARKING_ADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- runtime ---

    environment: Literal["lab", "staging", "prod"] = Field(
        default="lab", description="Where the tool runs; staging/prod require HTTPS"
    )
    debug: bool = Field(default=False, description="Force DEBUG logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root log level"
    )
    log_format: Literal["json", "text"] = Field(default="text", description="Console log format")

    # --- backend ---

    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the parking backend API",
    )
    api_timeout_seconds: float = Field(
        default=10.0, ge=1.0, le=120.0, description="Per-call timeout"
    )
    api_max_retries: int = Field(
        default=3, ge=1, le=10, description="Attempts for a list call on transient network errors"
    )
    api_retry_backoff_seconds: float = Field(
        default=0.5, ge=0.0, le=30.0, description="Retry n waits base * 2**n seconds"
    )
    api_verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    # --- request list ---

    search_debounce_seconds: float = Field(
        default=0.3, ge=0.0, le=5.0, description="Quiet period before a search fetch fires"
    )
    default_page_limit: int = Field(
        default=10, ge=1, le=100, description="Rows per page on first load and after a failure"
    )
    max_rejection_reason_length: int = Field(
        default=1000, ge=1, le=10000, description="Longest cleaned rejection reason accepted"
    )
    max_search_query_length: int = Field(
        default=100, ge=1, le=1000, description="Longest cleaned search query accepted"
    )

    # --- session ---

    session_file: Path = Field(
        default=Path("~/.parking_admin/session.json"),
        description="JSON file holding the bearer token and admin user",
    )
    login_route: str = Field(default="/login", description="Where an expired session is sent")

    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("login_route")
    @classmethod
    def validate_login_route(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("login_route must start with '/'")
        return v

    @model_validator(mode="after")
    def validate_transport_security(self) -> "Settings":
        """Bearer tokens only travel over HTTPS outside the lab."""
        if self.environment != "lab" and not self.api_base_url.startswith("https://"):
            raise ValueError(
                f"api_base_url must use https:// in the {self.environment} environment"
            )
        return self

    @property
    def session_path(self) -> Path:
        """``session_file`` with ``~`` expanded."""
        return self.session_file.expanduser()

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, building them from the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings | None) -> None:
    """Replace the process-wide settings; ``None`` forces a rebuild on next access."""
    global _settings
    _settings = settings


def _read_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".toml":
        import tomllib

        with path.open("rb") as f:
            return tomllib.load(f)

    import yaml

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_settings_from_file(config_file: Path | str) -> Settings:
    """Build settings from a YAML or TOML file.

    Values in the file take precedence over environment variables.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported or the content is not a mapping
    """
    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config file format: {path.suffix}. "
            f"Use one of {', '.join(SUPPORTED_CONFIG_SUFFIXES)}"
        )
    return Settings(**_read_config_file(path))
