"""Jinja2 template rendering for project scaffolding.

Provides the ``RenderingContext`` handed to every template and the
``TemplateRenderer`` that turns one template's text into output text.
Rendering is strict: a template that references a key the context does not
define fails with ``TemplateSyntaxError`` instead of producing empty output.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import Environment, StrictUndefined
from pydantic import BaseModel, ConfigDict, Field

from blitz_react.errors import TemplateSyntaxError

from .versions import SEMVER_RE


# ---------------------------------------------------------------------------
# Rendering context
# ---------------------------------------------------------------------------


class RenderingContext(BaseModel):
    """Read-only data available to every template of one run.

    Templates see the camelCase names: ``projectName``, ``versions``,
    ``isTypedVariant``, ``currentYear``, ``dependencies`` and
    ``devDependencies``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project_name: str = Field(..., alias="projectName")
    versions: dict[str, str] = Field(default_factory=dict)
    is_typed_variant: bool = Field(default=False, alias="isTypedVariant")
    current_year: int = Field(
        default_factory=lambda: datetime.now().year, alias="currentYear"
    )
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list, alias="devDependencies")

    def template_vars(self) -> dict[str, Any]:
        """Return a fresh dict of the template-facing names."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template text with a ``RenderingContext``.

    Placeholders use ``{{ key }}``, conditionals ``{% if key %}`` and
    iteration ``{% for item in key %}``.  Literal braces are written with
    ``{% raw %}...{% endraw %}``.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["version_range"] = _version_range_filter
        self.env.filters["title_case"] = _title_case_filter

    def render(
        self,
        template_text: str,
        context: RenderingContext | Mapping[str, Any],
        *,
        source: Path | None = None,
    ) -> str:
        """Render *template_text* with *context*.

        Args:
            template_text: Raw template content.
            context: The run's rendering context (or a plain mapping of
                template-facing names).
            source: Where the text came from; only used in error messages.

        Raises:
            TemplateSyntaxError: If the text is malformed or uses a key that
                the context does not provide.
        """
        variables = (
            context.template_vars()
            if isinstance(context, RenderingContext)
            else dict(context)
        )
        try:
            template = self.env.from_string(template_text)
            return template.render(**variables)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(exc.message or str(exc), path=source, lineno=exc.lineno) from exc
        except jinja2.UndefinedError as exc:
            raise TemplateSyntaxError(
                f"undefined context key: {exc.message}", path=source
            ) from exc
        except jinja2.TemplateError as exc:
            raise TemplateSyntaxError(str(exc), path=source) from exc


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _version_range_filter(version: str) -> str:
    """Turn ``1.2.3`` into the caret range ``^1.2.3``; leave anything else as is."""
    if SEMVER_RE.match(version):
        return f"^{version}"
    return version


def _title_case_filter(value: str) -> str:
    """Convert ``my-app`` or ``my_app`` to ``My App``."""
    parts = re.split(r"[-_\s]+", value)
    return " ".join(word.capitalize() for word in parts if word)
