"""Error formatting and display utilities."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..exceptions import ConfigurationError, FileSystemError, Neo4jError


class CLIError(Exception):
    """Base exception for CLI errors with exit code support."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: list[str] | None = None) -> None:
        """Initialize CLI error.

        Args:
            message: Error message
            exit_code: Exit code to use (1 for errors, 2 for config errors)
            suggestions: Optional list of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []


def suggestions_for(error: Exception) -> list[str]:
    """Troubleshooting hints for the pipeline's own error types."""
    if isinstance(error, CLIError):
        return error.suggestions
    if isinstance(error, ConfigurationError):
        return [
            "Verify config/base.yaml syntax",
            "Check AWARD_GRAPH__* environment variable overrides",
        ]
    if isinstance(error, Neo4jError):
        return [
            "Check that Neo4j is running and reachable at the configured URI",
            "Verify NEO4J_USER / NEO4J_PASSWORD",
            "The graph may be partially loaded; run 'award-graph reset' before retrying",
        ]
    if isinstance(error, FileSystemError):
        return ["Check source.csv_path in config/base.yaml or pass --csv"]
    return []


def format_error(error: Exception) -> Panel:
    """Format an error for Rich display."""
    error_text = Text()
    error_text.append("✗ ", style="bold red")
    error_text.append(str(error), style="red")

    if type(error).__name__ != "Exception":
        error_text.append(f"\n\nType: {type(error).__name__}", style="dim")

    suggestions = suggestions_for(error)
    if suggestions:
        suggestion_text = Text("\n\nSuggested fixes:", style="bold yellow")
        for i, suggestion in enumerate(suggestions, 1):
            suggestion_text.append(f"\n  {i}. {suggestion}", style="yellow")
        error_text.append(suggestion_text)

    return Panel(error_text, title="Error", border_style="red")


def exit_code_for(error: Exception) -> int:
    if isinstance(error, CLIError):
        return error.exit_code
    if isinstance(error, ConfigurationError):
        return 2
    return 1


def handle_error(
    error: Exception,
    console: Console | None = None,
    exit_code: int | None = None,
) -> None:
    """Display an error panel, then exit.

    Args:
        error: Exception to handle
        console: Console to print on
        exit_code: Override exit code (derived from the error type otherwise)
    """
    console = console or Console()
    console.print(format_error(error))
    raise typer.Exit(code=exit_code if exit_code is not None else exit_code_for(error))
