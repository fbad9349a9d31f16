"""Rich renderers for ServiceResult.

Output is drawn on a Console backed by StringIO and returned as text, so
callers decide between stdout and stderr.  Rich drops the styling when the
stream is not a terminal (pipes, Click's CliRunner).
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

if TYPE_CHECKING:
    from edcert.services.result import ServiceResult

NGINX_INDENT = "   "
CONSOLE_WIDTH = 120

EDCERT_THEME = Theme(
    {
        "edcert.error": "bold red",
        "edcert.op": "bold cyan",
        "edcert.key": "dim",
        "edcert.path": "bold blue",
        "edcert.heading": "bold",
        "edcert.nginx": "green",
    }
)


def _capture(draw: Callable[[Console], None]) -> str:
    buffer = StringIO()
    draw(Console(file=buffer, theme=EDCERT_THEME, highlight=False, width=CONSOLE_WIDTH))
    return buffer.getvalue().rstrip("\n")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render the issue report, or the error with any tool stderr."""
    if result.ok:
        return _capture(lambda console: _render_issue(result, console, verbose=verbose))
    return _capture(lambda console: _render_error(result, console, verbose=verbose))


def render_quiet(result: ServiceResult) -> str:
    """Key, certificate and CSR paths one per line, or a one-line error."""
    if result.error is not None:
        return f"ERROR: {result.op}: {result.error.message}"
    return "\n".join(result.artifact_paths)


# ── Helpers ───────────────────────────────────────────────────────────


def _line(console: Console, *parts: Text | str) -> None:
    """Print one unwrapped line; strings are taken literally, never as markup."""
    console.print(
        *(Text(p) if isinstance(p, str) else p for p in parts),
        sep="",
        soft_wrap=True,
    )


def _field(console: Console, key: str, value: Any) -> None:
    style = "edcert.path" if key == "path" else ""
    _line(console, Text(f"  {key}: ", style="edcert.key"), Text(str(value), style=style))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_issue(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    """Paths, Nginx lines, then the full certificate dump."""
    data = result.data
    _line(
        console,
        "Self-signed certificate and private key have been generated and saved to ",
        Text(str(data["domain_dir"]), style="edcert.path"),
        ":",
    )
    console.print()
    for label, key in (("Private Key", "private_key"), ("Certificate", "certificate"), ("CSR", "csr")):
        _line(console, f"{label}: ", Text(str(data[key]), style="edcert.path"))

    console.print()
    _line(console, "To use these in your Nginx configuration, add the following lines:")
    console.print()
    for nginx_line in str(data["nginx"]).splitlines():
        _line(console, Text(f"{NGINX_INDENT}{nginx_line}", style="edcert.nginx"))

    console.print()
    _line(console, Text("Here are the details of the generated certificate:", style="edcert.heading"))
    for detail_line in str(data["details"]).rstrip("\n").splitlines():
        _line(console, detail_line)

    if verbose and result.meta:
        console.print()
        _line(console, Text("  meta:", style="dim"))
        for key, value in result.meta.items():
            _line(console, f"    {key}: {value}")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    assert result.error is not None
    error = result.error
    _line(
        console,
        Text("ERROR", style="edcert.error"),
        Text(f"  {result.op}", style="edcert.op"),
        f": {error.message}",
    )
    stderr = error.detail.get("stderr")
    if stderr:
        for err_line in str(stderr).splitlines():
            _line(console, f"  {err_line}")
    if verbose:
        _field(console, "code", error.code.value)
        for key, value in error.detail.items():
            if key != "stderr":
                _field(console, key, value)
