from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cadence.domain.constants import (
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_PERFORMANCE_WINDOW,
    INITIAL_EASE,
    MIN_EASE,
)


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/cadence/config.toml",
        Path.home() / ".cadence.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for cadence.
    Supports loading from:
    1. Config file (~/.config/cadence/config.toml)
    2. Environment variables (CADENCE_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        extra="ignore",
    )

    # Storage
    backend: Literal["memory", "yaml"] = "yaml"
    store_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/cadence/reviews.yaml"
    )
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/cadence/logs")

    # Scheduler
    initial_ease: float = INITIAL_EASE
    min_ease: float = Field(default=MIN_EASE, gt=0)

    # Adapter / Sessions
    performance_window: int = Field(default=DEFAULT_PERFORMANCE_WINDOW, ge=1)
    max_queue_size: int = Field(default=DEFAULT_MAX_QUEUE_SIZE, ge=1)

    # Server
    host: str = "127.0.0.1"
    port: int = 8787

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Highest priority first
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("store_path", "log_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @model_validator(mode="after")
    def check_ease_bounds(self) -> "AppConfig":
        if self.min_ease > self.initial_ease:
            raise ValueError(
                f"min_ease ({self.min_ease}) must not exceed initial_ease ({self.initial_ease})"
            )
        return self


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/cadence/config.toml (if exists)
    3. Environment variables (CADENCE_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
