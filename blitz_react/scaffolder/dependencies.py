"""Dependency set construction for a template variant."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from .variants import BASE_PACKAGES, EXTENSION_PACKAGES, TemplateVariant
from .versions import VersionResolver


class DependencySet(BaseModel):
    """Ordered package names a generated project declares."""

    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list)

    @property
    def all_names(self) -> list[str]:
        """Runtime names followed by development names."""
        return [*self.dependencies, *self.dev_dependencies]


def _unique(names: Iterable[str], exclude: Iterable[str] = ()) -> list[str]:
    """Drop repeated names, keeping first occurrences, and anything in *exclude*."""
    seen = set(exclude)
    result: list[str] = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def build_dependency_set(variant: TemplateVariant | str) -> DependencySet:
    """Return the base package lists extended with *variant*'s extras.

    Base names come first, extension names after, both in declaration
    order.  Repeated names are dropped; a name already declared as a runtime
    dependency is never also listed as a development dependency.
    """
    extension = EXTENSION_PACKAGES.get(TemplateVariant(variant))

    dependencies = list(BASE_PACKAGES.dependencies)
    dev_dependencies = list(BASE_PACKAGES.dev_dependencies)
    if extension is not None:
        dependencies.extend(extension.dependencies)
        dev_dependencies.extend(extension.dev_dependencies)

    runtime = _unique(dependencies)
    return DependencySet(
        dependencies=runtime,
        dev_dependencies=_unique(dev_dependencies, exclude=runtime),
    )


async def resolve_dependency_versions(
    dependency_set: DependencySet, resolver: VersionResolver
) -> dict[str, str]:
    """Resolve a version for every name in *dependency_set*."""
    return await resolver.resolve_all(dependency_set.all_names)
