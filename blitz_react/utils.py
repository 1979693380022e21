"""Shared utility functions for blitz-react.

Provides async command execution, project-name validation, version
comparison, and Rich-based console reporting.  The scaffolding core reports
through these helpers so that all user-visible output goes through a single
``Console``.
"""

from __future__ import annotations

import asyncio
import os
import re
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()

RESERVED_PROJECT_NAMES: frozenset[str] = frozenset(
    {"node_modules", "favicon.ico", "test", "tests", "dist", "build"}
)

_PROJECT_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float = 120,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external tool without a shell and capture its output.

    The executable is looked up on ``PATH`` first, so ``npm`` also finds
    ``npm.cmd`` on Windows.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Seconds to wait before the process is killed.
        env: Extra environment variables layered over ``os.environ``.

    Returns:
        ``(returncode, stdout, stderr)`` with both streams decoded and
        stripped.  A missing executable is reported as 127, a timeout as -1.
    """
    described = " ".join(cmd)
    executable = shutil.which(cmd[0]) if cmd else None
    if executable is None:
        return (127, "", f"Command not found: {described}")

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *cmd[1:],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env={**os.environ, **env} if env else None,
        )
    except OSError as exc:
        return (127, "", f"Command not found: {described} ({exc})")

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {described}")

    return (
        process.returncode or 0,
        out.decode("utf-8", errors="replace").strip(),
        err.decode("utf-8", errors="replace").strip(),
    )


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def validate_project_name(name: str) -> tuple[bool, str]:
    """Check that *name* is usable as a project directory and package name.

    Returns:
        ``(True, "")`` when valid, otherwise ``(False, reason)``.

    Examples::

        validate_project_name("my-app") -> (True, "")
        validate_project_name("dist")   -> (False, '"dist" is a reserved name ...')
    """
    if not name:
        return False, "Project name cannot be empty"
    if name.strip() != name:
        return False, "Project name cannot start or end with whitespace"
    if not _PROJECT_NAME_RE.match(name):
        return (
            False,
            "Project name can only contain alphanumeric characters, hyphens and underscores",
        )
    if name.lower() in RESERVED_PROJECT_NAMES:
        return False, f'"{name}" is a reserved name and cannot be used'
    return True, ""


def compare_versions(a: str, b: str) -> int:
    """Compare two dotted version strings, ignoring a leading ``v``.

    Returns -1, 0 or 1 like a classic ``cmp``.  Missing components count as 0.
    """
    parts_a = [int(p) for p in re.findall(r"\d+", a.lstrip("v"))]
    parts_b = [int(p) for p in re.findall(r"\d+", b.lstrip("v"))]
    for i in range(max(len(parts_a), len(parts_b))):
        num_a = parts_a[i] if i < len(parts_a) else 0
        num_b = parts_b[i] if i < len(parts_b) else 0
        if num_a > num_b:
            return 1
        if num_a < num_b:
            return -1
    return 0


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str) -> None:
    """Print the tool banner as a full-width rule."""
    console.print()
    console.print(Rule(f"[bold cyan] {title} [/bold cyan]", style="cyan"))
    console.print()


def print_step(message: str) -> None:
    """Print a blue progress message for a step that is starting."""
    console.print(f"[blue]{escape(message)}[/blue]")


def print_detail(message: str) -> None:
    """Print a dimmed detail line."""
    console.print(f"[dim]{escape(message)}[/dim]")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
