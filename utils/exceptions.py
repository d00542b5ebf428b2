"""
Error taxonomy for the configuration registry.
"""
from typing import Iterable, Optional

from utils.validators import ValidationError


class ConfigError(Exception):
    """Base class for registry errors."""
    pass


class ConfigNotFound(ConfigError):
    """No record is registered under the requested environment name."""

    def __init__(self, environment: str, available: Optional[Iterable[str]] = None):
        self.environment = environment
        self.available = sorted(available) if available is not None else []
        message = f"No deployment config for environment '{environment}'"
        if self.available:
            message += f". Available: {self.available}"
        super().__init__(message)


class ConfigInvalid(ConfigError, ValidationError):
    """A record failed schema or semantic validation."""

    def __init__(self, field: str, environment: Optional[str], reason: str):
        self.field = field
        self.environment = environment
        self.reason = reason
        where = f"[{environment}] " if environment else ""
        super().__init__(f"{where}{field}: {reason}")


class DuplicateEnvironment(ConfigError):
    """An environment name is already registered."""

    def __init__(self, environment: str):
        self.environment = environment
        super().__init__(f"Environment '{environment}' is already registered")
