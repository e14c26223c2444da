"""Coloured status lines for the validator and builder.

Every line is tagged by severity (``ERROR:``, ``WARNING:``, ``INFO:``, ``✓``)
and also recorded, so a run can be inspected without capturing the terminal.
"""

from __future__ import annotations

from typing import List, Literal, Tuple

import typer

Level = Literal["error", "warning", "success", "info", "detail", "plain"]


class StatusReporter:
    """Emit and record human-readable status lines.

    Args:
        echo: Print to the terminal (errors go to stderr)
        verbose: Show ``detail`` lines
    """

    def __init__(self, echo: bool = True, verbose: bool = False):
        self.echo = echo
        self.verbose = verbose
        self.messages: List[Tuple[Level, str]] = []

    def error(self, message: str) -> None:
        self._record("error", message)
        if self.echo:
            typer.echo(typer.style("ERROR:", fg=typer.colors.RED) + f" {message}", err=True)

    def warning(self, message: str, err: bool = False) -> None:
        self._record("warning", message)
        if self.echo:
            typer.echo(typer.style("WARNING:", fg=typer.colors.BRIGHT_YELLOW) + f" {message}", err=err)

    def success(self, message: str) -> None:
        self._record("success", message)
        if self.echo:
            typer.echo(typer.style("✓", fg=typer.colors.GREEN) + f" {message}")

    def info(self, message: str) -> None:
        self._record("info", message)
        if self.echo:
            typer.echo(typer.style("INFO:", fg=typer.colors.BLUE) + f" {message}")

    def detail(self, message: str) -> None:
        if not self.verbose:
            return
        self._record("detail", message)
        if self.echo:
            typer.echo(f"  {message}")

    def plain(self, message: str = "", fg: str | None = None, err: bool = False) -> None:
        self._record("plain", message)
        if self.echo:
            typer.secho(message, fg=fg, err=err)

    def heading(self, title: str, rule: str = "=") -> None:
        self.plain(rule * 32)
        self.plain(title)
        self.plain(rule * 32)

    def lines(self, level: Level) -> List[str]:
        """Recorded messages of one level, in emission order."""
        return [message for lvl, message in self.messages if lvl == level]

    def _record(self, level: Level, message: str) -> None:
        self.messages.append((level, message))
