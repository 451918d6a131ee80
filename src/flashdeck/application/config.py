from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashdeck.domain.constants import (
    INITIAL_EASINESS_FACTOR,
    LEARNING_STEPS_MINUTES,
    MIN_EASINESS_FACTOR,
    RELEARNING_STEPS_MINUTES,
)


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/flashdeck/config.toml",
        Path.home() / ".flashdeck.toml",
    ]


class SchedulerConfig(BaseSettings):
    """
    Configuration for the SM-2 scheduler.
    Supports loading from:
    1. Environment variables (FLASHDECK_*)
    2. Config file (~/.config/flashdeck/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHDECK_",
        extra="ignore",
    )

    # Learning steps
    learning_steps_minutes: tuple[int, ...] = LEARNING_STEPS_MINUTES
    relearning_steps_minutes: tuple[int, ...] = RELEARNING_STEPS_MINUTES

    # Easiness
    initial_easiness_factor: float = Field(default=INITIAL_EASINESS_FACTOR)

    # Raise on corrupted states instead of clamping them
    strict_invariants: bool = False

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

        # Find the first existing file
        toml_file = None
        for f in _config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: overrides, then env, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("learning_steps_minutes", "relearning_steps_minutes")
    @classmethod
    def check_steps(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v:
            raise ValueError("at least one step is required")
        if any(step <= 0 for step in v):
            raise ValueError("steps must be positive minutes")
        return v

    @field_validator("initial_easiness_factor")
    @classmethod
    def check_initial_easiness(cls, v: float) -> float:
        if v < MIN_EASINESS_FACTOR:
            raise ValueError(f"must be >= {MIN_EASINESS_FACTOR}")
        return v


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> SchedulerConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in SchedulerConfig
    2. ~/.config/flashdeck/config.toml (if exists)
    3. Environment variables (FLASHDECK_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return SchedulerConfig(**overrides)
