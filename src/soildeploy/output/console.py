"""Rich Console factory, theme, and live step reporter for soildeploy output.

Renderers use StringIO-backed consoles, preserving the
``render_result() -> str`` contract. The :class:`StepReporter` writes
straight to stderr so progress shows while long commands run and stdout
stays clean for the final result (and ``--json``).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

SOIL_THEME = Theme(
    {
        "soil.info": "bold blue",
        "soil.success": "bold green",
        "soil.warning": "bold yellow",
        "soil.error": "bold red",
        "soil.key": "dim",
        "soil.url": "cyan",
        "soil.service": "bold",
        "soil.up": "green",
        "soil.down": "red",
    }
)

_LEVEL_LABELS: dict[str, str] = {
    "info": "INFO",
    "success": "SUCCESS",
    "warning": "WARNING",
    "error": "ERROR",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SOIL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def status_text(level: str, message: str) -> Text:
    """Build a ``[LEVEL] message`` line with the level's theme style."""
    label = _LEVEL_LABELS.get(level, level.upper())
    line = Text()
    line.append(f"[{label}]", style=f"soil.{level}")
    line.append(f" {message}")
    return line


class StepReporter:
    """Print color-coded ``[INFO]``/``[WARNING]`` step lines to stderr.

    With *quiet*, only warnings and errors are shown. With *enabled* False
    (``--json``), nothing is printed.
    """

    def __init__(self, *, quiet: bool = False, enabled: bool = True) -> None:
        self._quiet = quiet
        self._enabled = enabled
        self._console = Console(stderr=True, theme=SOIL_THEME, highlight=False)

    def __call__(self, level: str, message: str) -> None:
        if not self._enabled:
            return
        if self._quiet and level not in ("warning", "error"):
            return
        self._console.print(status_text(level, message))
