import os
import json
import logging
import platform
from dataclasses import dataclass, asdict, fields
from typing import Optional

from .errors import ConfigError, ConfigIOError, InvalidInput, MissingApiKey

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENAI_API_KEY"
CONFIG_DIR_ENV = "SUPERTERMINAL_CONFIG_DIR"

DEFAULT_MODEL = "gpt-4"
DEFAULT_MAX_TOKENS = 150
DEFAULT_TEMPERATURE = 0.3

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def config_dir() -> str:
    """
    Returns the per-user directory holding the config file.

    SUPERTERMINAL_CONFIG_DIR wins outright; otherwise XDG_CONFIG_HOME or the
    platform's usual location is used, with a `superterminal` subdirectory.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return os.path.expanduser(override)

    base = os.environ.get("XDG_CONFIG_HOME")
    if not base:
        system = platform.system()
        if system == "Windows":
            base = os.environ.get("APPDATA") or os.path.expanduser("~")
        elif system == "Darwin":
            base = os.path.expanduser("~/Library/Application Support")
        else:
            base = os.path.expanduser("~/.config")
    return os.path.join(base, "superterminal")


def config_path() -> str:
    return os.path.join(config_dir(), "config.json")


@dataclass
class Config:
    """Credentials and model parameters for the translator."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    @classmethod
    def from_env(cls) -> "Config":
        """Builds a default configuration using the API key from the environment."""
        api_key = os.environ.get(API_KEY_ENV)
        if api_key is None:
            raise MissingApiKey()
        return cls(api_key=api_key)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Loads the configuration from its JSON file. Unknown fields are ignored."""
        path = path or config_path()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise ConfigError(str(e)) from e
        except OSError as e:
            raise ConfigIOError(str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in {path}")
        missing = {f.name for f in fields(cls)} - set(data)
        if missing:
            raise ConfigError(f"Missing fields {sorted(missing)} in {path}")

        api_key, model = data["api_key"], data["model"]
        max_tokens, temperature = data["max_tokens"], data["temperature"]
        if not isinstance(api_key, str):
            raise ConfigError("api_key must be a string")
        if not isinstance(model, str):
            raise ConfigError("model must be a string")
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens < 0:
            raise ConfigError("max_tokens must be a non-negative integer")
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise ConfigError("temperature must be a number")

        return cls(api_key=api_key, model=model, max_tokens=max_tokens, temperature=float(temperature))

    @classmethod
    def load_or_default(cls, path: Optional[str] = None) -> "Config":
        """
        Loads the config file, falling back to defaults when it is unusable.

        The fallback needs OPENAI_API_KEY in the environment. A freshly built
        default is written back to disk; failing to do so is only logged.
        """
        try:
            return cls.load(path)
        except (ConfigError, ConfigIOError) as e:
            logger.info(f"Using default configuration: {e}")

        config = cls.from_env()
        try:
            config.save(path)
        except (ConfigError, ConfigIOError) as e:
            logger.debug(f"Could not save default configuration: {e}")
        return config

    def save(self, path: Optional[str] = None) -> None:
        """Writes the configuration as pretty-printed JSON, creating parent directories."""
        path = path or config_path()
        try:
            content = json.dumps(asdict(self), indent=2)
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConfigIOError(str(e)) from e
        logger.info(f"Configuration saved to {path}")

    def update(
        self,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> bool:
        """
        Applies the given field updates.

        Every supplied value is validated before any field changes, so a
        rejected update leaves the configuration untouched.

        Returns:
            True if at least one field was supplied.
        """
        if max_tokens is not None and max_tokens <= 0:
            raise InvalidInput("Max tokens must be a positive integer")
        if temperature is not None and not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
            raise InvalidInput(f"Temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}")

        updated = False
        if model is not None:
            self.model = model
            updated = True
        if max_tokens is not None:
            self.max_tokens = max_tokens
            updated = True
        if temperature is not None:
            self.temperature = temperature
            updated = True
        return updated

    @property
    def masked_api_key(self) -> str:
        if not self.api_key:
            return ""
        return f"{self.api_key[:4]}...{self.api_key[-4:]}" if len(self.api_key) > 8 else "****"

    def __str__(self) -> str:
        config_dict = asdict(self)
        config_dict["api_key"] = self.masked_api_key
        return str(config_dict)
