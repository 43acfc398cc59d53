"""
Application settings management.

Settings are loaded from environment variables with .env file support.
Coaching behaviour (phase thresholds, event limits) is loaded from YAML.
All configuration is validated using Pydantic.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mindcoach.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Environment variables (prefixed ``MINDCOACH_``) take precedence over
    .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="MINDCOACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Paths
    # ==========================================================================

    config_dir: Path = Field(
        default=Path("config"),
        description="Directory containing YAML configuration files",
    )
    log_dir: Path = Field(
        default=Path("logs"), description="Directory for per-run log files"
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_sessions_to_keep: int = Field(
        default=5, ge=1, le=100, description="Number of run logs to retain"
    )
    debug: bool = Field(default=False, description="Enable debug mode")


# ============================================================================
# Coach Configuration (from YAML)
# ============================================================================


class PhaseRule(BaseModel):
    """Advancement rule for a single coaching phase.

    A reply advances the conversation when its richness score reaches
    ``advance_threshold``. ``max_hold_turns`` (if set) forces advancement
    after that many held replies so a terse user is not stuck forever.
    """

    advance_threshold: float = Field(
        default=1.0, ge=0.0, description="Richness needed to leave the phase"
    )
    max_hold_turns: Optional[int] = Field(
        default=None,
        ge=1,
        description="Replies after which the phase advances anyway (null = never)",
    )


class PhaseRules(BaseModel):
    """Rules for every non-terminal phase."""

    stabilize: PhaseRule = Field(
        default_factory=lambda: PhaseRule(advance_threshold=3, max_hold_turns=2)
    )
    open: PhaseRule = Field(
        default_factory=lambda: PhaseRule(advance_threshold=5, max_hold_turns=3)
    )
    reflect: PhaseRule = Field(
        default_factory=lambda: PhaseRule(advance_threshold=3, max_hold_turns=1)
    )
    reframe: PhaseRule = Field(
        default_factory=lambda: PhaseRule(advance_threshold=1, max_hold_turns=1)
    )
    plan: PhaseRule = Field(
        default_factory=lambda: PhaseRule(advance_threshold=1, max_hold_turns=1)
    )


class EventLimits(BaseModel):
    """Size limits applied to every recorded CoachEvent."""

    max_tags: int = Field(default=6, ge=0, le=6)
    guidance_max_length: int = Field(default=200, ge=10, le=200)


class CoachConfig(BaseModel):
    """
    Complete coaching configuration loaded from coach_config.yaml.
    """

    phases: PhaseRules = Field(default_factory=PhaseRules)
    events: EventLimits = Field(default_factory=EventLimits)

    def rule_for(self, phase: str) -> Optional[PhaseRule]:
        """Return the rule for ``phase`` or None for the terminal phase."""
        return getattr(self.phases, phase, None)


def load_coach_config(config_path: Optional[Path] = None) -> CoachConfig:
    """
    Load coaching configuration from YAML file.

    Args:
        config_path: Path to coach_config.yaml. If None, looks in the project
            config directory and then the current working directory.

    Returns:
        CoachConfig with validated settings (defaults if no file is found)

    Raises:
        ConfigurationError: If the file exists but cannot be parsed or validated
    """
    if config_path is None:
        candidates = [
            Path(__file__).resolve().parent.parent.parent
            / "config"
            / "coach_config.yaml",
            Path.cwd() / "config" / "coach_config.yaml",
        ]
        config_path = next((p for p in candidates if p.exists()), None)
        if config_path is None:
            return CoachConfig()

    config_path = Path(config_path).resolve()

    if not config_path.exists():
        return CoachConfig()

    try:
        with open(str(config_path)) as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not config_data:
        return CoachConfig()

    try:
        return CoachConfig(**config_data)
    except (TypeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid coach config {config_path}: {e}") from e


# Global settings instance
settings = Settings()

# Global coach config instance
coach_config = load_coach_config()
