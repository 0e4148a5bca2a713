"""
SuperTerminal: convert natural language into shell commands using the OpenAI API.

Describe what you want to do in plain language and get back a single shell command,
shown for review and optionally copied to the clipboard. The command is never run.
"""

__version__ = "0.1.0"
