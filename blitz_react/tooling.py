"""External tool wrappers: npm install, git, preflight checks, cleanup.

These are thin layers over ``run_command``.  They report progress on the
shared Rich console and hand back a ``CommandResult`` rather than raising,
leaving fatal-or-not decisions to the generator and CLI.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from blitz_react.config import GitConfig, InstallConfig
from blitz_react.errors import ScaffoldError
from blitz_react.protocols import CommandResult
from blitz_react.utils import (
    compare_versions,
    console,
    print_detail,
    print_error,
    print_step,
    print_success,
    print_warning,
    run_command,
)

MIN_NODE_VERSION = "v16.0.0"


class NpmInstaller:
    """Runs ``npm install`` inside a generated project."""

    def __init__(self, config: InstallConfig | None = None) -> None:
        self.config = config or InstallConfig()

    async def install(self, target_dir: Path, packages: list[str]) -> CommandResult:
        cmd = [self.config.command, "install"]
        cmd_str = " ".join(cmd)

        if not packages:
            print_warning("No dependencies to install.")
            return CommandResult(success=True, message="nothing to install", command=cmd_str)

        print_step("\nInstalling dependencies...")
        print_detail(f"Installing packages: {', '.join(packages)}")

        with console.status("Installing packages..."):
            returncode, stdout, stderr = await run_command(
                cmd, cwd=target_dir, timeout=self.config.timeout
            )

        if returncode == -1:
            return CommandResult(
                success=False,
                message=(
                    f"Installation timed out after {self.config.timeout} seconds. "
                    f"Try installing manually with '{cmd_str}'."
                ),
                command=cmd_str,
            )
        if returncode != 0:
            return CommandResult(
                success=False,
                message=stderr or stdout or f"{cmd_str} exited with code {returncode}",
                command=cmd_str,
            )

        print_success("Dependencies installed successfully!")
        return CommandResult(success=True, command=cmd_str)


class GitInitializer:
    """Creates a git repository with a single initial commit."""

    def __init__(self, config: GitConfig | None = None) -> None:
        self.config = config or GitConfig()

    async def init_repo(self, target_dir: Path) -> CommandResult:
        print_step("\nInitializing git repository...")
        steps = (
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", self.config.commit_message],
        )
        for cmd in steps:
            returncode, _, stderr = await run_command(
                cmd, cwd=target_dir, timeout=self.config.timeout
            )
            if returncode != 0:
                return CommandResult(
                    success=False,
                    message=stderr or f"exited with code {returncode}",
                    command=" ".join(cmd),
                )

        print_success("Git repository initialized successfully!")
        return CommandResult(success=True, command="git init")


async def cleanup_failed_project(target_dir: Path) -> bool:
    """Delete a partially generated project.  Returns ``True`` on success."""
    print_warning("\nCleaning up failed project...")
    try:
        await asyncio.to_thread(shutil.rmtree, target_dir)
    except OSError as exc:
        print_error(f"Error during cleanup: {exc}")
        print_warning(f"Please manually remove the directory: {target_dir}")
        return False
    print_success("Cleanup completed.")
    return True


async def check_environment(require_npm: bool = True) -> dict[str, bool]:
    """Preflight checks for the tools a run will shell out to.

    An old or missing Node.js and a missing git only produce warnings.

    Returns:
        Mapping of ``{"node": ..., "git": ..., "npm": ...}`` availability.

    Raises:
        ScaffoldError: If *require_npm* is set and npm is not on ``PATH``.
    """
    available: dict[str, bool] = {}

    returncode, node_version, _ = await run_command(["node", "--version"], timeout=15)
    available["node"] = returncode == 0
    if returncode != 0:
        print_warning("Warning: Node.js was not found in PATH.")
    elif compare_versions(node_version, MIN_NODE_VERSION) < 0:
        print_warning(
            f"Warning: You're using Node.js {node_version}. "
            f"We recommend at least {MIN_NODE_VERSION}."
        )

    returncode, _, _ = await run_command(["git", "--version"], timeout=15)
    available["git"] = returncode == 0
    if returncode != 0:
        print_warning(
            "Warning: Git is not installed or not in PATH. Git initialization will be skipped."
        )

    returncode, _, _ = await run_command(["npm", "--version"], timeout=15)
    available["npm"] = returncode == 0
    if returncode != 0 and require_npm:
        raise ScaffoldError(
            "npm is not installed or not in PATH. Please install npm to use this tool."
        )
    return available
