"""blitz-react scaffolder: turns bundled templates into a new React project.

Quick usage::

    from blitz_react.scaffolder import GenerateOptions, ProjectGenerator

    generator = ProjectGenerator()
    result = await generator.generate(
        GenerateOptions(project_name="my-app", template_variant="react-ts")
    )
"""

from blitz_react.scaffolder.dependencies import DependencySet, build_dependency_set
from blitz_react.scaffolder.generator import (
    GenerateOptions,
    GenerationResult,
    ProjectGenerator,
    check_target,
)
from blitz_react.scaffolder.materializer import DirectoryMaterializer, plan_tree
from blitz_react.scaffolder.templates import RenderingContext, TemplateRenderer
from blitz_react.scaffolder.variants import TEMPLATES, TemplateVariant
from blitz_react.scaffolder.versions import FALLBACK_VERSION, VersionCache, VersionResolver

__all__ = [
    "FALLBACK_VERSION",
    "TEMPLATES",
    "DependencySet",
    "DirectoryMaterializer",
    "GenerateOptions",
    "GenerationResult",
    "ProjectGenerator",
    "RenderingContext",
    "TemplateRenderer",
    "TemplateVariant",
    "VersionCache",
    "VersionResolver",
    "build_dependency_set",
    "check_target",
    "plan_tree",
]
