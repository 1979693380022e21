"""blitz-react configuration.

Typed configuration for a scaffolding run.  All settings use Pydantic v2
models so they are validated at construction time and can be built from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_ROOT = Path(__file__).parent / "templates"


class RegistryConfig(BaseModel):
    """How package versions are looked up."""

    backend: Literal["npm", "http"] = Field(
        default="npm",
        description="'npm' shells out to the npm CLI, 'http' queries the registry directly",
    )
    url: str = Field(default="https://registry.npmjs.org")
    timeout: float = Field(default=15.0, gt=0, description="Per-lookup timeout in seconds")


class InstallConfig(BaseModel):
    """Settings for the post-generation dependency install."""

    command: str = Field(default="npm")
    timeout: int = Field(default=180, ge=10, description="Install timeout in seconds")


class GitConfig(BaseModel):
    """Settings for the initial repository commit."""

    commit_message: str = Field(default="Initial commit from blitz-react")
    timeout: int = Field(default=60, ge=5)


class Config(BaseModel):
    """Global blitz-react configuration.

    Created once by the CLI (or by tests) and passed to the generator and
    the collaborators it wires up.
    """

    output_dir: Path = Field(default_factory=Path.cwd)
    template_root: Path = Field(default=DEFAULT_TEMPLATE_ROOT)
    template_suffix: str = Field(default=".j2", min_length=1)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    git: GitConfig = Field(default_factory=GitConfig)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def common_template_dir(self) -> Path:
        """Tree shared by every variant."""
        return self.template_root / "common"

    @property
    def manifest_template(self) -> Path:
        """Template for the generated ``package.json``."""
        return self.template_root / "manifest" / f"package.json{self.template_suffix}"

    def target_dir(self, project_name: str) -> Path:
        """Directory a project called *project_name* is generated into."""
        return self.output_dir / project_name

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            BLITZ_OUTPUT_DIR, BLITZ_TEMPLATE_ROOT, BLITZ_TEMPLATE_SUFFIX,
            BLITZ_REGISTRY_BACKEND, BLITZ_REGISTRY_URL, BLITZ_REGISTRY_TIMEOUT,
            BLITZ_INSTALL_TIMEOUT.
        """
        registry_kwargs: dict[str, Any] = {}
        if os.environ.get("BLITZ_REGISTRY_BACKEND"):
            registry_kwargs["backend"] = os.environ["BLITZ_REGISTRY_BACKEND"]
        if os.environ.get("BLITZ_REGISTRY_URL"):
            registry_kwargs["url"] = os.environ["BLITZ_REGISTRY_URL"]
        if os.environ.get("BLITZ_REGISTRY_TIMEOUT"):
            registry_kwargs["timeout"] = float(os.environ["BLITZ_REGISTRY_TIMEOUT"])

        install_kwargs: dict[str, Any] = {}
        if os.environ.get("BLITZ_INSTALL_TIMEOUT"):
            install_kwargs["timeout"] = int(os.environ["BLITZ_INSTALL_TIMEOUT"])

        kwargs: dict[str, Any] = {}
        if os.environ.get("BLITZ_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["BLITZ_OUTPUT_DIR"])
        if os.environ.get("BLITZ_TEMPLATE_ROOT"):
            kwargs["template_root"] = Path(os.environ["BLITZ_TEMPLATE_ROOT"])
        if os.environ.get("BLITZ_TEMPLATE_SUFFIX"):
            kwargs["template_suffix"] = os.environ["BLITZ_TEMPLATE_SUFFIX"]

        return cls(
            registry=RegistryConfig(**registry_kwargs),
            install=InstallConfig(**install_kwargs),
            **kwargs,
        )
