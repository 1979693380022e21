"""Interfaces for the external tools the generator drives.

Each collaborator is a single-purpose capability injected into the
generator, so tests can substitute doubles without spawning processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass
class CommandResult:
    """Outcome of an external tool invocation."""

    success: bool
    message: str = ""
    command: str = ""


@runtime_checkable
class RegistryClient(Protocol):
    """Looks up published package versions."""

    async def query_latest_version(self, package: str) -> str:
        """Return the raw latest-version text for *package*."""
        ...

    async def query_dist_tag(self, package: str, tag: str = "latest") -> str:
        """Return the raw version text the distribution *tag* points at."""
        ...


@runtime_checkable
class PackageInstaller(Protocol):
    """Installs the dependencies of a generated project."""

    async def install(self, target_dir: Path, packages: list[str]) -> CommandResult: ...


@runtime_checkable
class RepoInitializer(Protocol):
    """Creates a repository with an initial commit."""

    async def init_repo(self, target_dir: Path) -> CommandResult: ...
