"""Turns a template source tree into files under a target directory.

Traversal and I/O are kept apart: ``plan_tree`` walks the source tree and
yields one action per entry, and ``DirectoryMaterializer`` performs those
actions.  Entries are classified by name only:

- directories become ``EnterDirectory`` actions,
- files ending in the template suffix (``.j2`` by default) become
  ``RenderFile`` actions whose target drops the suffix,
- everything else becomes a byte-for-byte ``CopyFile``.

Any ``__projectname__`` token in a file or directory name is replaced with
the project name.
"""

from __future__ import annotations

import asyncio
import stat
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from blitz_react.errors import TemplateReadError, WriteError

from .templates import RenderingContext, TemplateRenderer

PROJECT_NAME_TOKEN = "__projectname__"

DEFAULT_TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnterDirectory:
    source: Path
    target: Path


@dataclass(frozen=True)
class RenderFile:
    source: Path
    target: Path


@dataclass(frozen=True)
class CopyFile:
    source: Path
    target: Path


Action = Union[EnterDirectory, RenderFile, CopyFile]


def transform_name(
    name: str,
    project_name: str,
    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX,
    *,
    is_template: bool = False,
) -> str:
    """Return the target name for a source entry called *name*.

    Examples::

        transform_name("__projectname__.config", "acme") -> "acme.config"
        transform_name("README.md.j2", "acme", is_template=True) -> "README.md"
    """
    if is_template and name.endswith(template_suffix):
        name = name[: -len(template_suffix)]
    return name.replace(PROJECT_NAME_TOKEN, project_name)


def is_template_file(name: str, template_suffix: str = DEFAULT_TEMPLATE_SUFFIX) -> bool:
    """Whether a file called *name* is rendered rather than copied."""
    return name.endswith(template_suffix) and len(name) > len(template_suffix)


def plan_tree(
    source_root: Path,
    target_root: Path,
    project_name: str,
    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX,
) -> Iterator[Action]:
    """Yield the actions that materialise *source_root* under *target_root*.

    The walk is depth-first with siblings in name order, and a directory's
    ``EnterDirectory`` always precedes the actions for its contents.  A
    missing *source_root* yields nothing.

    Raises:
        TemplateReadError: If a directory cannot be listed.
    """
    source_root = Path(source_root)
    if not source_root.is_dir():
        return
    yield from _walk(source_root, Path(target_root), project_name, template_suffix)


def _walk(
    source_dir: Path, target_dir: Path, project_name: str, template_suffix: str
) -> Iterator[Action]:
    try:
        entries = sorted(source_dir.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise TemplateReadError(source_dir, str(exc)) from exc

    for entry in entries:
        if entry.is_dir():
            target = target_dir / transform_name(entry.name, project_name, template_suffix)
            yield EnterDirectory(entry, target)
            yield from _walk(entry, target, project_name, template_suffix)
        elif is_template_file(entry.name, template_suffix):
            target = target_dir / transform_name(
                entry.name, project_name, template_suffix, is_template=True
            )
            yield RenderFile(entry, target)
        else:
            target = target_dir / transform_name(entry.name, project_name, template_suffix)
            yield CopyFile(entry, target)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


class DirectoryMaterializer:
    """Executes the actions of ``plan_tree`` against the filesystem.

    Blocking filesystem calls run in worker threads.  The first failure
    aborts the pass; files already written stay on disk.
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        template_suffix: str = DEFAULT_TEMPLATE_SUFFIX,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.template_suffix = template_suffix

    async def materialize(
        self,
        source_root: str | Path,
        target_root: str | Path,
        context: RenderingContext,
    ) -> list[Path]:
        """Materialise *source_root* into *target_root*.

        Returns:
            Paths of the files written (directories are not listed).

        Raises:
            TemplateReadError: A source directory or file could not be read.
            TemplateSyntaxError: A template failed to render.
            WriteError: A target file or directory could not be written.
        """
        actions = await asyncio.to_thread(
            list,
            plan_tree(
                Path(source_root),
                Path(target_root),
                context.project_name,
                self.template_suffix,
            ),
        )

        written: list[Path] = []
        for action in actions:
            await self.execute(action, context)
            if not isinstance(action, EnterDirectory):
                written.append(action.target)
        return written

    async def execute(
        self, action: Action, context: RenderingContext | Mapping[str, Any]
    ) -> Path:
        """Perform a single action and return its target path."""
        if isinstance(action, EnterDirectory):
            await asyncio.to_thread(_make_dir, action.target)
        elif isinstance(action, RenderFile):
            text = await asyncio.to_thread(_read_text, action.source)
            content = self.renderer.render(text, context, source=action.source)
            await asyncio.to_thread(_write_text, action.target, content)
        else:
            await asyncio.to_thread(_copy_file, action.source, action.target)
        return action.target


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(path, str(exc)) from exc


def _write_text(path: Path, content: str) -> None:
    """Create parent dirs and write *content*."""
    _make_dir(path.parent)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


def _copy_file(source: Path, target: Path) -> None:
    """Copy *source* to *target* byte for byte.

    Execute bits follow the source; the owner can always write the copy so a
    later tree may overwrite it.
    """
    try:
        data = source.read_bytes()
        mode = stat.S_IMODE(source.stat().st_mode) | stat.S_IWUSR
    except OSError as exc:
        raise TemplateReadError(source, str(exc)) from exc
    _make_dir(target.parent)
    try:
        if target.exists():
            target.chmod(target.stat().st_mode | stat.S_IWUSR)
        target.write_bytes(data)
        target.chmod(mode)
    except OSError as exc:
        raise WriteError(target, str(exc)) from exc
