import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dockersshell.const import DEFAULT_CONFIG_PATH, DEFAULT_ENDPOINT, DEFAULT_IMAGE, DEFAULT_MAX_AGE, DEFAULT_USER

logger = logging.getLogger(__name__)


class ShellConfig(BaseModel):
    """Configuration for a dockersshell run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    endpoints: list[str] = Field(
        default_factory=lambda: [DEFAULT_ENDPOINT],
        description="Ordered pool of container engine endpoint addresses (e.g. 'http://10.0.0.5:4243'). "
        "Order breaks ties between equally loaded endpoints.",
    )
    image: str = Field(
        default=DEFAULT_IMAGE,
        description="Image to start. It must run an SSH daemon that exposes port 22/tcp.",
    )
    user: str = Field(default=DEFAULT_USER, description="Login user passed to ssh.")
    max_age: int = Field(
        default=DEFAULT_MAX_AGE,
        ge=0,
        description="Age in seconds after which the reaper removes a container. 0 disables reaping.",
    )
    check_banner: bool = Field(
        default=True,
        description="Require the SSH protocol banner before declaring the container ready, "
        "instead of accepting any TCP connection.",
    )

    @field_validator("endpoints")
    @classmethod
    def validate_endpoints(cls, v: list[str]) -> list[str]:
        """Validate that at least one endpoint is configured."""
        if not v:
            msg = "At least one endpoint must be configured"
            raise ValueError(msg)
        return v

    @property
    def reaping_enabled(self) -> bool:
        """Check if the reaper has an age threshold to enforce."""
        return self.max_age > 0


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ShellConfig:
    """Load the configuration file, falling back to defaults.

    A missing or unreadable file, malformed YAML, a document that is not a
    mapping, and values that fail validation all yield the built-in defaults.

    Args:
        path: Location of the YAML configuration file.

    Returns:
        ShellConfig: The loaded configuration.

    """
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No configuration file at %s, using defaults", config_path)
        return ShellConfig()
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Unable to read configuration file %s, using defaults: %s", config_path, e)
        return ShellConfig()

    if raw is None:
        return ShellConfig()
    if not isinstance(raw, dict):
        logger.warning("Configuration file %s is not a mapping, using defaults", config_path)
        return ShellConfig()

    try:
        return ShellConfig.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid configuration in %s, using defaults: %s", config_path, e)
        return ShellConfig()
