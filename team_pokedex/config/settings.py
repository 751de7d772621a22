import logging
from typing import List

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Reference data sources
    alias_data_url: HttpUrl = Field(
        "https://raw.githubusercontent.com/fanzeyi/pokemon.json/master/pokedex.json",
        description="JSON list of {id, name: {english, french}} used for alias lookup.",
    )
    pokeapi_base_url: str = Field(
        "https://pokeapi.co/api/v2", description="Versioned PokéAPI REST base path."
    )
    preferred_languages: List[str] = Field(
        default_factory=lambda: ["fr", "en"],
        description="Flavor text languages, most preferred first.",
    )

    # HTTP behaviour
    request_timeout: float = Field(
        30.0, gt=0, description="Per-request timeout in seconds."
    )
    max_redirects: int = Field(
        5, ge=0, description="Maximum redirect hops followed for a single request."
    )
    request_attempts: int = Field(
        1,
        ge=1,
        description="Total attempts for transient failures (1 disables retries).",
    )
    user_agent: str = Field(
        "team-pokedex-script/1.0 (+https://pokeapi.co/)",
        description="User-Agent header sent with every request.",
    )

    # Output
    sidecar_global_name: str = Field(
        "__TEAM_DATA__",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
        description="Global variable assigned in the JS sidecar file.",
    )
    page_title: str = Field("Notre équipe", description="Title of the cards page.")

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
