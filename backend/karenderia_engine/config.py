"""
Engine configuration.

This module defines the engine settings using a Pydantic model populated
from environment variables (optionally loaded from a .env file).
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
import os
from dotenv import load_dotenv

# Load .env from backend directory (works regardless of cwd)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseModel):
    """
    Engine configuration settings.

    Can be configured via environment variables or .env file.
    Environment variable names are uppercase (e.g., PORTION_SCALE_FACTOR).

    Attributes:
        PORTION_SCALE_FACTOR: Multiplier applied to portion weight per ingredient
        MIN_PORTION_WEIGHT: Lower bound for portion weight (grams)
        MAX_PORTION_WEIGHT: Upper bound for portion weight (grams)
        REVERSE_MATCH_MIN_LENGTH: Minimum ingredient length for keyword-contains-text matching
        DEFAULT_USER_SEVERITY: Severity assumed when a profile entry omits one
        LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)
    """

    # Dish aggregation
    PORTION_SCALE_FACTOR: float = Field(
        default_factory=lambda: float(os.getenv("PORTION_SCALE_FACTOR", "0.1")),
        gt=0.0,
        description="Per-ingredient scale applied to the portion weight (100g reference records)"
    )

    MIN_PORTION_WEIGHT: float = Field(
        default_factory=lambda: float(os.getenv("MIN_PORTION_WEIGHT", "1.0")),
        gt=0.0,
        description="Portion weights at or below zero are clamped to this value"
    )

    MAX_PORTION_WEIGHT: float = Field(
        default_factory=lambda: float(os.getenv("MAX_PORTION_WEIGHT", "10000.0")),
        gt=0.0,
        description="Larger portion weights are clamped down to this value"
    )

    # Keyword matching
    REVERSE_MATCH_MIN_LENGTH: int = Field(
        default_factory=lambda: int(os.getenv("REVERSE_MATCH_MIN_LENGTH", "3")),
        ge=1,
        le=20,
        description="Shortest ingredient text allowed to match inside a longer lexicon keyword"
    )

    # Profile defaults
    DEFAULT_USER_SEVERITY: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_USER_SEVERITY", "moderate"),
        description="Severity used when a user allergen entry has none"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Logging level (DEBUG/INFO/WARNING/ERROR)"
    )

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )
        return v_upper

    @field_validator('DEFAULT_USER_SEVERITY')
    @classmethod
    def validate_default_severity(cls, v: str) -> str:
        """Ensure the default severity is one of the known tiers."""
        valid_severities = ["mild", "moderate", "severe"]
        v_lower = v.strip().lower()
        if v_lower not in valid_severities:
            raise ValueError(
                f"DEFAULT_USER_SEVERITY must be one of: {', '.join(valid_severities)}"
            )
        return v_lower

    # Environment-derived defaults go through the same validators
    model_config = {"validate_default": True}


# Create global settings instance
settings = Settings()


# Configure logging based on settings
def configure_logging():
    """Configure engine logging based on settings."""
    import logging

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.LOG_LEVEL} level")
    logger.info(
        f"Portion scale factor: {settings.PORTION_SCALE_FACTOR}, "
        f"min portion weight: {settings.MIN_PORTION_WEIGHT}g"
    )


# Initialize logging on import
configure_logging()
