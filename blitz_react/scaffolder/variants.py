"""Template variants and the package lists that belong to them."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TemplateVariant(str, Enum):
    """Template flavours a project can be generated from."""

    REACT_JS = "react-js"
    REACT_TS = "react-ts"


class VariantSpec(BaseModel):
    """Display name and source directory of a variant."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    directory: str = Field(..., description="Subdirectory of the template root")
    typed: bool = Field(default=False, description="Whether the variant is TypeScript")


class PackageSet(BaseModel):
    """Runtime and development package names, in declaration order."""

    model_config = ConfigDict(frozen=True)

    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()


TEMPLATES: dict[TemplateVariant, VariantSpec] = {
    TemplateVariant.REACT_JS: VariantSpec(
        display_name="React (JavaScript)",
        directory="react-js",
    ),
    TemplateVariant.REACT_TS: VariantSpec(
        display_name="React (TypeScript)",
        directory="react-ts",
        typed=True,
    ),
}

BASE_PACKAGES = PackageSet(
    dependencies=("react", "react-dom"),
    dev_dependencies=("vite", "@vitejs/plugin-react", "tailwindcss", "@tailwindcss/vite"),
)

# Extra packages appended after the base lists for a variant.
EXTENSION_PACKAGES: dict[TemplateVariant, PackageSet] = {
    TemplateVariant.REACT_TS: PackageSet(
        dev_dependencies=("typescript", "@types/react", "@types/react-dom"),
    ),
}


def get_variant(variant: TemplateVariant | str) -> VariantSpec:
    """Look up the ``VariantSpec`` for *variant*.

    Raises:
        ValueError: If *variant* is not a known template name.
    """
    try:
        key = TemplateVariant(variant)
    except ValueError:
        known = ", ".join(v.value for v in TemplateVariant)
        raise ValueError(f'Template "{variant}" does not exist. Available: {known}') from None
    return TEMPLATES[key]
