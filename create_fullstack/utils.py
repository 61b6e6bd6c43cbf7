"""Shared helpers: subprocesses, package manifests and terminal output.

Everything the scaffolder prints goes through the module-level Rich
``console`` so tests can capture it and the spinner can share the terminal.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.rule import Rule
from rich.table import Table

console = Console()

# (returncode, stdout, stderr)
CommandResult = tuple[int, str, str]
CommandRunner = Callable[..., Awaitable[CommandResult]]

MISSING_EXECUTABLE = 127
TIMED_OUT = -1


# ---------------------------------------------------------------------------
# Subprocesses
# ---------------------------------------------------------------------------


def _decode(raw: Optional[bytes]) -> str:
    return (raw or b"").decode("utf-8", errors="replace").strip()


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: Optional[int] = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run *cmd* and wait for it to exit.

    Args:
        cmd: Program and arguments; no shell is involved.
        cwd: Working directory for the child.
        timeout: Seconds before the child is killed.  ``None`` waits for as
            long as the child runs, which is what the interactive framework
            generators need.
        capture: Capture stdout/stderr.  With ``False`` the child writes
            straight to the user's terminal and can prompt on its own.
        env: Extra variables layered over the current environment.

    Returns:
        ``(returncode, stdout, stderr)``.  The output strings are empty when
        *capture* is off.  A missing executable yields ``MISSING_EXECUTABLE``
        and a timeout yields ``TIMED_OUT``, with the reason in stderr.
    """
    pipe = asyncio.subprocess.PIPE if capture else None
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=pipe,
            stderr=pipe,
            cwd=str(cwd) if cwd else None,
            env={**os.environ, **env} if env else None,
        )
    except FileNotFoundError as exc:
        return (MISSING_EXECUTABLE, "", f"Command not found: {cmd[0]} ({exc})")

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (TIMED_OUT, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    return (process.returncode or 0, _decode(out), _decode(err))


# ---------------------------------------------------------------------------
# package.json and other files
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Read a JSON object (a ``package.json`` in practice) from *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the content is not valid JSON or not an object
            (``json.JSONDecodeError`` is a ``ValueError``).
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data


async def save_json(data: dict[str, Any], path: str | Path) -> None:
    """Write *data* the way npm formats manifests: two-space indent, final newline."""
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    await asyncio.to_thread(write_text, Path(path), text)


def write_text(path: Path, content: str) -> None:
    """Write *content* to *path*, creating missing parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def ensure_dir(path: str | Path) -> Path:
    """Create *path* if needed and return it resolved."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory.resolve()


def is_empty_dir(path: Path) -> bool:
    """``True`` only for an existing directory without entries."""
    return path.is_dir() and next(path.iterdir(), None) is None


def format_location(path: Path, base: Optional[Path] = None) -> str:
    """*path* relative to *base* (default: the cwd), or absolute when outside it."""
    base = (base or Path.cwd()).resolve()
    path = path.resolve()
    try:
        return path.relative_to(base).as_posix() or "."
    except ValueError:
        return str(path)


def format_duration(seconds: float) -> str:
    """Human-readable elapsed time: ``3.7s`` under a minute, ``1m 5s`` above."""
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}m {rest}s"


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------


STEP_NAMES: dict[int, str] = {
    1: "BACKEND",
    2: "FRONTEND",
    3: "ROOT MANIFEST",
    4: "DOCKER",
    5: "INSTALL",
}

STEP_COLORS: dict[int, str] = {
    1: "bright_yellow",
    2: "bright_magenta",
    3: "bright_cyan",
    4: "bright_blue",
    5: "bright_green",
}


def print_step_header(step: int, name: str) -> None:
    """Full-width coloured rule announcing step *step*."""
    color = STEP_COLORS.get(step, "white")
    console.print()
    console.print(Rule(f"[bold {color}] Step {step}: {name.upper()} [/bold {color}]", style=color))


def print_summary_table(rows: dict[str, str], title: str = "Summary") -> None:
    """Two-column table of ``rows`` followed by a blank line."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")
    for item, value in rows.items():
        table.add_row(item, str(value))
    console.print(table)
    console.print()


def _print_styled(message: str, style: str) -> None:
    console.print(message, style=style, markup=False)


def print_success(message: str) -> None:
    _print_styled(message, "bold green")


def print_error(message: str) -> None:
    _print_styled(message, "bold red")


def print_warning(message: str) -> None:
    _print_styled(message, "bold yellow")


def create_progress() -> Progress:
    """Transient spinner for steps whose subprocess output is captured."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
