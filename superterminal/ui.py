from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from .config import Config
from .errors import UserCancelled

console = Console()
err_console = Console(stderr=True)


def display_status(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def display_verbose_context(shell: str, query: str) -> None:
    """Shows the detected shell and the query being processed."""
    console.print(f"[cyan]Detected shell:[/cyan] [bright_cyan]{escape(shell)}[/bright_cyan]")
    console.print(f"[cyan]Processing query:[/cyan] {escape(query)}")


def display_command(command: str) -> None:
    """Display the generated command."""
    console.print("\n[bold green]Generated Command:[/bold green]")
    console.print(f"  [cyan]{escape(command)}[/cyan]", highlight=False, soft_wrap=True)
    console.print()


def confirm_copy() -> bool:
    """Ask the user whether to copy the command to the clipboard."""
    try:
        return Confirm.ask("Copy this command to clipboard?", default=True, console=console)
    except (KeyboardInterrupt, EOFError):
        console.print()
        raise UserCancelled()


def display_copied(command: str) -> None:
    console.print("\n[bold green]✓ Command copied to clipboard![/bold green]")
    console.print(command, markup=False, highlight=False, soft_wrap=True)
    console.print("[bright_black]Paste it anywhere with Ctrl+V (or Cmd+V on Mac)[/bright_black]")


def display_clipboard_fallback(command: str, error: Exception) -> None:
    """Reports a clipboard failure and shows the command for copying by hand."""
    err_console.print(f"[yellow]Warning: Failed to copy to clipboard:[/yellow] {escape(str(error))}")
    console.print("\n[bold green]Command ready to use:[/bold green]")
    console.print(command, markup=False, highlight=False, soft_wrap=True)
    console.print("[bright_black]You can now copy and paste this command into your terminal.[/bright_black]")


def display_not_copied() -> None:
    console.print("[yellow]Command not copied.[/yellow]")


def display_config(config: Config) -> None:
    """Display the current configuration."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column()

    api_key_status = f"Set ({config.masked_api_key})" if config.api_key else "Not set"
    table.add_row("Model:", escape(config.model))
    table.add_row("Max Tokens:", str(config.max_tokens))
    table.add_row("Temperature:", str(config.temperature))
    table.add_row("API Key:", api_key_status)

    console.print("[bold cyan]Current Configuration:[/bold cyan]")
    console.print(table)


def display_config_updated() -> None:
    console.print("[bold green]Configuration updated successfully![/bold green]")


def display_no_config_changes() -> None:
    console.print("[yellow]No configuration changes specified.[/yellow]")
    console.print("Use --show to see current configuration.")


def display_error(error: Exception) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
