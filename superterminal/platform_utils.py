"""
Platform-specific helpers: shell detection and clipboard access.

Each concern sits behind a small interface with one implementation per
platform, picked once at startup by get_shell_detector() / get_clipboard().
"""
import abc
import os
import logging
import platform
from typing import Optional

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardError(Exception):
    """Writing to the clipboard failed."""


class ShellDetector(abc.ABC):
    @abc.abstractmethod
    def detect(self) -> str:
        """Returns the name of the user's shell, e.g. 'bash' or 'powershell'."""


class PosixShellDetector(ShellDetector):
    """Reads $SHELL, defaulting to zsh on macOS and bash elsewhere."""

    def __init__(self, system: Optional[str] = None):
        self.system = system or platform.system()

    def detect(self) -> str:
        shell_name = _shell_from_env()
        if shell_name:
            return shell_name
        return "zsh" if self.system == "Darwin" else "bash"


class WindowsShellDetector(ShellDetector):
    """Honours $SHELL (Git Bash, MSYS), then tells PowerShell from cmd."""

    def detect(self) -> str:
        shell_name = _shell_from_env()
        if shell_name:
            return shell_name
        if os.environ.get("PSModulePath"):
            return "powershell"
        return "cmd"


def _shell_from_env() -> str:
    shell_path = os.environ.get("SHELL", "")
    # Handle both separators so Windows-style paths work too
    return shell_path.replace("\\", "/").rstrip("/").split("/")[-1]


def get_shell_detector() -> ShellDetector:
    system = platform.system()
    if system == "Windows":
        return WindowsShellDetector()
    return PosixShellDetector(system)


class Clipboard(abc.ABC):
    @abc.abstractmethod
    def copy(self, text: str) -> None:
        """Puts text on the system clipboard, raising ClipboardError on failure."""


class PyperclipClipboard(Clipboard):
    """Cross-platform clipboard backed by pyperclip."""

    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard write failed: {e}")
            raise ClipboardError(str(e)) from e


def get_clipboard() -> Clipboard:
    # pyperclip picks the native mechanism (pbcopy, xclip/wl-copy, win32) itself
    return PyperclipClipboard()
