import abc
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from .config import Config
from .errors import ApiError, ConfigError, InvalidInput, MissingApiKey

# Configure logging
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that converts natural language requests into shell commands.
Rules:
1. Return ONLY the shell command, nothing else
2. Do not include explanations or markdown formatting
3. Do not include code block markers (```)
4. Return a single command or a pipeline of commands
5. Make commands safe and avoid destructive operations without explicit confirmation
6. For Linux/Unix systems, use standard bash commands
7. If the request is ambiguous, make reasonable assumptions
8. Do not include comments in the command

Examples:
Input: "list all files in the current directory"
Output: ls -la

Input: "find all python files"
Output: find . -name "*.py"

Input: "show disk usage"
Output: df -h

Input: "count lines in all text files"
Output: find . -name "*.txt" -exec wc -l {} +
"""

# Checked in order, only the first match is stripped.
OPENING_FENCES = ("```bash", "```sh", "```")
CLOSING_FENCE = "```"


def sanitize_command(content: str) -> str:
    """
    Reduces a raw model response to a single command line.

    Strips one leading code fence (```bash, ```sh or a bare ```), a trailing
    bare fence, and returns the first non-blank line. An empty or blank
    response yields an empty string.
    """
    content = content.strip()

    for fence in OPENING_FENCES:
        if content.startswith(fence):
            content = content[len(fence):]
            break

    content = content.strip()

    if content.endswith(CLOSING_FENCE):
        content = content[:-len(CLOSING_FENCE)].strip()

    for line in content.splitlines():
        line = line.strip()
        if line:
            return line
    return ""


def build_user_message(query: str, shell: Optional[str] = None) -> str:
    """Constructs the user message embedding the raw query."""
    if shell:
        return f"Convert this natural language request to a {shell} shell command: {query}"
    return f"Convert this natural language request to a shell command: {query}"


@dataclass
class TranslationRequest:
    """A single chat-completion request. Never persisted."""

    system_prompt: str
    user_query: str
    model: str
    max_tokens: int
    temperature: float

    def to_messages(self) -> List[Dict[str, str]]:
        if not self.system_prompt or not self.user_query:
            raise ConfigError("Cannot build a chat message from empty content")
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_query},
        ]


class CompletionBackend(abc.ABC):
    """Anything that can answer a TranslationRequest with raw text."""

    @abc.abstractmethod
    def complete(self, request: TranslationRequest) -> Optional[str]:
        """
        Sends the request and returns the first choice's text.

        Returns:
            The raw response text, or None when the provider returned no
            choice or no message content.

        Raises:
            ApiError: The provider or the network failed.
        """


class OpenAIBackend(CompletionBackend):
    """Chat-completion backend using the official OpenAI client."""

    def __init__(self, api_key: str, client: Optional[OpenAI] = None):
        if not api_key:
            raise MissingApiKey()
        self.client = client or OpenAI(api_key=api_key)

    def complete(self, request: TranslationRequest) -> Optional[str]:
        messages = request.to_messages()
        try:
            response = self.client.chat.completions.create(
                model=request.model,
                messages=messages,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except OpenAIError as e:
            logger.error(f"Error calling OpenAI API: {e}")
            raise ApiError(str(e)) from e

        if not response.choices:
            return None
        message = response.choices[0].message
        if message is None:
            return None
        return message.content


class CommandTranslator:
    """Turns a natural-language request into one shell command line."""

    def __init__(self, config: Config, backend: Optional[CompletionBackend] = None):
        """
        Initializes the translator.

        Args:
            config: Model name, token limit and temperature to request with.
            backend: Where requests are sent. Defaults to the OpenAI API using
                the configured key.
        """
        self.config = config
        self.backend = backend or OpenAIBackend(config.api_key)

    def build_request(self, query: str, shell: Optional[str] = None) -> TranslationRequest:
        if not self.config.model:
            raise ConfigError("Model name must not be empty")
        if self.config.max_tokens <= 0:
            raise ConfigError("Max tokens must be a positive integer")
        return TranslationRequest(
            system_prompt=SYSTEM_PROMPT,
            user_query=build_user_message(query, shell),
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )

    def translate(self, query: str, shell: Optional[str] = None) -> str:
        """
        Translates a natural-language query into a shell command.

        Issues exactly one request to the backend. Nothing is retried.

        Args:
            query: What the user wants to do.
            shell: The user's shell name, passed to the model as a hint.

        Returns:
            The sanitized command, possibly empty if the model answered
            with blank text.
        """
        if not query.strip():
            raise InvalidInput("Input cannot be empty")

        request = self.build_request(query, shell)
        logger.info(f"Requesting translation from model: {request.model}")
        content = self.backend.complete(request)
        if content is None:
            raise ConfigError("No response from AI")

        logger.debug(f"Raw response: {content!r}")
        return sanitize_command(content)
