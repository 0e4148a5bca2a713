"""Exception types raised by SuperTerminal."""


class SuperTerminalError(Exception):
    """Base class for every error surfaced to the user."""

    prefix = ""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}{self.message}"


class ApiError(SuperTerminalError):
    """The language-model provider or the network failed."""

    prefix = "OpenAI API error: "


class ConfigError(SuperTerminalError):
    """Malformed configuration, an unbuildable request or an empty response."""

    prefix = "Configuration error: "


class ConfigIOError(SuperTerminalError):
    """Filesystem failure while reading or writing the configuration."""

    prefix = "IO error: "


class InvalidInput(SuperTerminalError):
    prefix = "Invalid input: "


class UserCancelled(SuperTerminalError):
    def __init__(self):
        super().__init__("User cancelled the operation")


class MissingApiKey(SuperTerminalError):
    def __init__(self):
        super().__init__("API key not found. Please set OPENAI_API_KEY environment variable")
