"""Main scaffolding orchestrator.

Takes ``GenerateOptions`` and produces a new project directory:

1. refuse to run if the target directory already exists,
2. create the target root,
3. resolve dependency versions and build the ``RenderingContext``,
4. render ``package.json`` from the manifest template,
5. materialise the ``common`` tree, then the variant tree,
6. optionally install dependencies (failure is fatal),
7. optionally initialise git (failure only warns).

Files written before a failure are left in place; deciding whether to clean
them up belongs to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from blitz_react.config import Config
from blitz_react.errors import (
    GitInitFailure,
    InstallFailure,
    TargetExistsError,
    TemplateReadError,
    WriteError,
)
from blitz_react.protocols import PackageInstaller, RegistryClient, RepoInitializer
from blitz_react.registry import build_registry
from blitz_react.tooling import GitInitializer, NpmInstaller
from blitz_react.utils import print_warning, validate_project_name

from .dependencies import DependencySet, build_dependency_set, resolve_dependency_versions
from .materializer import DirectoryMaterializer
from .templates import RenderingContext, TemplateRenderer
from .variants import TemplateVariant, get_variant
from .versions import VersionCache, VersionResolver

MANIFEST_FILENAME = "package.json"


# ---------------------------------------------------------------------------
# Options and result models
# ---------------------------------------------------------------------------


class GenerateOptions(BaseModel):
    """What the user asked for."""

    project_name: str = Field(..., description="Project and directory name")
    template_variant: TemplateVariant = Field(default=TemplateVariant.REACT_JS)
    install_deps: bool = Field(default=True, description="Run the package manager afterwards")
    init_git: bool = Field(default=True, description="Create an initial git commit afterwards")

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        valid, reason = validate_project_name(value)
        if not valid:
            raise ValueError(reason)
        return value


class GenerationResult(BaseModel):
    """Summary of a successful run."""

    project_root: Path
    variant: TemplateVariant
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    files_written: list[Path] = Field(default_factory=list)
    fallback_packages: list[str] = Field(
        default_factory=list, description="Packages written with the 'latest' fallback"
    )
    installed: bool = False
    git_initialized: bool = False


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


def check_target(target_dir: Path) -> None:
    """Ensure nothing exists at *target_dir*.

    Raises:
        TargetExistsError: If a file or directory is already there.
    """
    if target_dir.exists():
        raise TargetExistsError(target_dir)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffolds a project from the template tree described by ``config``.

    External tools are injected so tests can replace them; by default the
    registry backend comes from ``config.registry`` and installs/commits go
    through npm and git.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        registry: RegistryClient | None = None,
        installer: PackageInstaller | None = None,
        repo_initializer: RepoInitializer | None = None,
        on_warning: Callable[[str], None] = print_warning,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or build_registry(self.config.registry)
        self.installer = installer or NpmInstaller(self.config.install)
        self.repo_initializer = repo_initializer or GitInitializer(self.config.git)
        self.on_warning = on_warning
        self.renderer = TemplateRenderer()
        self.materializer = DirectoryMaterializer(self.renderer, self.config.template_suffix)

    # -- Public API --------------------------------------------------------

    async def generate(self, options: GenerateOptions) -> GenerationResult:
        """Generate the project described by *options*.

        Returns:
            A ``GenerationResult`` describing what was written.

        Raises:
            TargetExistsError: The target directory already exists; nothing
                was written.
            TemplateReadError, TemplateSyntaxError, WriteError: A template
                could not be materialised.
            InstallFailure: Dependencies were requested but failed to install.
        """
        variant = get_variant(options.template_variant)
        target = self.config.target_dir(options.project_name)

        check_target(target)
        await asyncio.to_thread(_create_root, target)

        dependency_set = build_dependency_set(options.template_variant)
        resolver = VersionResolver(
            self.registry,
            VersionCache(),
            timeout=self.config.registry.timeout,
            on_warning=self.on_warning,
        )
        versions = await resolve_dependency_versions(dependency_set, resolver)
        context = self.build_context(options, dependency_set, versions, typed=variant.typed)

        files_written = [await self._render_manifest(target, context)]
        files_written += await self.materializer.materialize(
            self.config.common_template_dir, target, context
        )
        files_written += await self.materializer.materialize(
            self.config.template_root / variant.directory, target, context
        )

        installed = False
        if options.install_deps:
            await self._install(target, dependency_set)
            installed = True

        git_initialized = False
        if options.init_git:
            git_initialized = await self._init_git(target)

        return GenerationResult(
            project_root=target,
            variant=options.template_variant,
            dependencies={name: versions[name] for name in dependency_set.dependencies},
            dev_dependencies={name: versions[name] for name in dependency_set.dev_dependencies},
            files_written=files_written,
            fallback_packages=list(resolver.fallbacks),
            installed=installed,
            git_initialized=git_initialized,
        )

    # -- Context building --------------------------------------------------

    @staticmethod
    def build_context(
        options: GenerateOptions,
        dependency_set: DependencySet,
        versions: dict[str, str],
        *,
        typed: bool,
    ) -> RenderingContext:
        """Assemble the read-only template context for a run."""
        return RenderingContext(
            project_name=options.project_name,
            versions=dict(versions),
            is_typed_variant=typed,
            dependencies=list(dependency_set.dependencies),
            dev_dependencies=list(dependency_set.dev_dependencies),
        )

    # -- Steps -------------------------------------------------------------

    async def _render_manifest(self, target: Path, context: RenderingContext) -> Path:
        """Render the manifest template to ``<target>/package.json``."""
        template_path = self.config.manifest_template
        text = await asyncio.to_thread(_read_template, template_path)
        content = self.renderer.render(text, context, source=template_path)
        out = target / MANIFEST_FILENAME
        await asyncio.to_thread(_write_file, out, content)
        return out

    async def _install(self, target: Path, dependency_set: DependencySet) -> None:
        result = await self.installer.install(target, dependency_set.all_names)
        if not result.success:
            raise InstallFailure(target, result.message)

    async def _init_git(self, target: Path) -> bool:
        result = await self.repo_initializer.init_repo(target)
        if result.success:
            return True
        failure = GitInitFailure(target, result.message)
        self.on_warning(f"Warning: {failure} You can initialize git manually.")
        return False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _create_root(path: Path) -> None:
    try:
        path.mkdir(parents=True)
    except FileExistsError as exc:
        raise TargetExistsError(path) from exc
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(path, str(exc)) from exc


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc
