"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from soildeploy.output.console import create_console, get_output, status_text

if TYPE_CHECKING:
    from rich.console import Console

    from soildeploy.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _line(console: Console, level: str, message: str = "") -> None:
    console.print(status_text(level, message))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="soil.key")
    style = "soil.url" if str(value).startswith(("http://", "https://")) else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _service_table(services: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table of service states."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="soil.service", no_wrap=True)
    table.add_column("Service")
    table.add_column("State")
    table.add_column("Status")
    if verbose:
        table.add_column("Running")

    for svc in services:
        running = bool(svc.get("running"))
        state = Text(str(svc.get("state", "")), style="soil.up" if running else "soil.down")
        row: list[Any] = [
            str(svc.get("name", "")),
            str(svc.get("service", "")),
            state,
            str(svc.get("status", "")),
        ]
        if verbose:
            row.append("yes" if running else "no")
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    _line(console, "error", msg)
    if err is None:
        return

    detail = err.detail
    if detail.get("hint"):
        _line(console, "warning", str(detail["hint"]))
    if detail.get("stderr"):
        for stderr_line in str(detail["stderr"]).splitlines()[-10:]:
            console.print(Text(f"  {stderr_line}", style="dim"))
    services = detail.get("services")
    if services:
        console.print()
        console.print(_service_table(services, verbose=verbose))
    logs = detail.get("logs_command")
    if logs and logs not in msg:
        _line(console, "info", f"Check logs with: {logs}")

    if verbose and detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_deploy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the post-deployment summary."""
    data = result.data

    console.print()
    _line(console, "info", "Running containers:")
    console.print(_service_table(data.get("services", []), verbose=verbose))

    console.print()
    _line(console, "success", "SOILDATA deployment initiated successfully!")
    console.print()
    _line(console, "info", "Access your SOILDATA instance at:")
    _line(console, "info", f"   {data.get('access_url', '')}")

    console.print()
    _line(console, "info", "Admin interfaces:")
    for name, url in data.get("admin_interfaces", {}).items():
        _line(console, "info", f"   {name}: {url}")

    console.print()
    _line(console, "info", "Default admin credentials:")
    _line(console, "info", f"   Username: {data.get('admin_username', '')}")
    _line(console, "info", f"   Password: {data.get('admin_password', '')}")

    console.print()
    for reminder in data.get("reminders", []):
        _line(console, "warning", reminder)

    console.print()
    _line(console, "info", "Next steps:")
    for number, step in enumerate(data.get("next_steps", []), start=1):
        _line(console, "info", f"   {number}. {step}")

    console.print()
    _line(console, "info", f"View logs with: {data.get('logs_command', '')}")


def _render_status(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _line(console, "success", f"{data.get('running', 0)}/{data.get('total', 0)} services running")
    console.print(_service_table(data.get("services", []), verbose=verbose))


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _line(console, "success", "Preflight checks passed")
    for key in ("project_dir", "env_file", "traefikhost", "useremail", "access_url"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _line(console, "success", result.op)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "deploy": _render_deploy,
    "status": _render_status,
    "check": _render_check,
}
