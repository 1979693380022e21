"""Shared pytest fixtures for the blitz-react test suite.

Provides reusable fixtures for:
- In-memory doubles for the registry, installer and git collaborators
- Small template trees written into ``tmp_path``
- A ``Config`` pointed at a temporary output directory
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from blitz_react.config import Config
from blitz_react.errors import VersionResolutionFailure
from blitz_react.protocols import CommandResult


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------


class StubRegistry:
    """Registry double that records every lookup.

    Args:
        versions: Raw text returned by ``query_latest_version`` per package.
            Unknown packages get *default*.
        dist_tags: Raw text returned by ``query_dist_tag`` per package.
        default: Answer for packages missing from *versions*.
        fail: Raise ``VersionResolutionFailure`` from every call.
        delay: Seconds each call sleeps before answering.
    """

    def __init__(
        self,
        versions: dict[str, str] | None = None,
        dist_tags: dict[str, str] | None = None,
        default: str = "1.0.0",
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.versions = versions or {}
        self.dist_tags = dist_tags or {}
        self.default = default
        self.fail = fail
        self.delay = delay
        self.latest_calls: list[str] = []
        self.dist_tag_calls: list[tuple[str, str]] = []

    async def query_latest_version(self, package: str) -> str:
        self.latest_calls.append(package)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise VersionResolutionFailure(package, "registry unavailable")
        return self.versions.get(package, self.default)

    async def query_dist_tag(self, package: str, tag: str = "latest") -> str:
        self.dist_tag_calls.append((package, tag))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise VersionResolutionFailure(package, "registry unavailable")
        return self.dist_tags.get(package, "")


class StubInstaller:
    def __init__(self, success: bool = True, message: str = "") -> None:
        self.success = success
        self.message = message
        self.calls: list[tuple[Path, list[str]]] = []

    async def install(self, target_dir: Path, packages: list[str]) -> CommandResult:
        self.calls.append((target_dir, list(packages)))
        return CommandResult(success=self.success, message=self.message, command="npm install")


class StubRepoInitializer:
    def __init__(self, success: bool = True, message: str = "") -> None:
        self.success = success
        self.message = message
        self.calls: list[Path] = []

    async def init_repo(self, target_dir: Path) -> CommandResult:
        self.calls.append(target_dir)
        return CommandResult(success=self.success, message=self.message, command="git init")


@pytest.fixture
def registry() -> StubRegistry:
    """Registry that answers every package with ``1.0.0``."""
    return StubRegistry()


@pytest.fixture
def failing_registry() -> StubRegistry:
    """Registry whose every lookup fails."""
    return StubRegistry(fail=True)


@pytest.fixture
def make_registry():
    """Factory for ``StubRegistry`` instances with custom answers."""
    return StubRegistry


@pytest.fixture
def make_installer():
    return StubInstaller


@pytest.fixture
def make_repo_initializer():
    return StubRepoInitializer


@pytest.fixture
def installer() -> StubInstaller:
    return StubInstaller()


@pytest.fixture
def repo_initializer() -> StubRepoInitializer:
    return StubRepoInitializer()


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


MINIMAL_MANIFEST = (
    '{\n'
    '  "name": "{{ projectName }}",\n'
    '  "dependencies": {\n'
    '{% for name in dependencies %}\n'
    '    "{{ name }}": "{{ versions[name] }}"{{ "," if not loop.last else "" }}\n'
    '{% endfor %}\n'
    '  }\n'
    '}\n'
)


@pytest.fixture
def make_tree():
    """Return ``write_tree`` so tests can build their own source trees."""
    return write_tree


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A small template root with manifest, common and both variant trees."""
    return write_tree(
        tmp_path / "templates",
        {
            "manifest/package.json.j2": MINIMAL_MANIFEST,
            "common/README.md.j2": "# {{ projectName }}\n",
            "common/.gitignore": "node_modules\n",
            "react-js/src/App.jsx.j2": "export default () => '{{ projectName }}';\n",
            "react-ts/src/App.tsx.j2": "export default (): string => '{{ projectName }}';\n",
            "react-ts/tsconfig.json": '{"compilerOptions": {}}\n',
        },
    )


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def config(output_dir: Path) -> Config:
    """Config using the bundled templates and a temporary output directory."""
    return Config(output_dir=output_dir)


@pytest.fixture
def small_config(output_dir: Path, template_root: Path) -> Config:
    """Config using the small ``template_root`` fixture tree."""
    return Config(output_dir=output_dir, template_root=template_root)
