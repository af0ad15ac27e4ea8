"""Exporter configuration loaded from environment variables.

Values come from the environment or a .env file in the working directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ExporterConfig(BaseSettings):
    """Exporter configuration loaded from environment variables."""

    # Skolplattformen settings (browser-only portal, no API)
    skolplattformen_url: str = Field(
        default="https://skolplattformen.stockholm.se",
        description="Skolplattformen start page",
    )
    skolplattformen_email: str = Field(
        default="",
        description="E-mail typed into the first SSO page",
    )
    skolplattformen_user: str = Field(
        default="",
        description="Username for the 'Elever' login form",
    )
    skolplattformen_pass: str = Field(
        default="",
        description="Password for the 'Elever' login form",
    )

    # Skola24 render service
    render_host: str = Field(
        default="fns.stockholm.se",
        description="Host name sent in the render request body",
    )
    timetables_url: str = Field(
        default="https://fns.stockholm.se/ng/api/services/skola24/get/personal/timetables",
        description="Response carrying the student and unit GUIDs",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound for each render key / render request",
    )

    # Output
    output_path: str = Field(
        default="result.csv",
        description="CSV file written after a successful run",
    )
    csv_quote_fields: bool = Field(
        default=False,
        description="Quote CSV fields containing commas, quotes or newlines",
    )
    lunch_teacher_override: str = Field(
        default="https://skolorna.com",
        description="Text placed in the teacher column of lunch lessons",
    )

    # Browser
    headless: bool = Field(
        default=True,
        description="Run Chromium without a visible window",
    )
    block_resources: bool = Field(
        default=False,
        description="Abort image/font/media requests to speed up page loads",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ExporterConfig | None = None


def get_config() -> ExporterConfig:
    """Get the exporter configuration singleton.

    Returns:
        ExporterConfig: Exporter configuration instance
    """
    global _config
    if _config is None:
        _config = ExporterConfig()
    return _config
