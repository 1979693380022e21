"""Error taxonomy for blitz-react.

Every error raised by the scaffolding core derives from ``ScaffoldError`` and
carries enough context (file, package, step) for the CLI to print an
actionable message.  The core never terminates the process itself.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class TargetExistsError(ScaffoldError):
    """Raised when the target project directory already exists."""

    def __init__(self, target: Path) -> None:
        self.target = target
        super().__init__(
            f"Directory {target.name} already exists at {target}. "
            "Choose a different project name or remove the directory."
        )


class TemplateReadError(ScaffoldError):
    """Raised when a template or static source file cannot be read."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read template {path}: {reason}")


class TemplateSyntaxError(ScaffoldError):
    """Raised when a template is malformed or references an unknown context key."""

    def __init__(self, message: str, path: Path | None = None, lineno: int | None = None) -> None:
        self.path = path
        self.lineno = lineno
        location = ""
        if path is not None:
            location = f" in {path}"
            if lineno is not None:
                location += f" (line {lineno})"
        super().__init__(f"Template error{location}: {message}")


class WriteError(ScaffoldError):
    """Raised when a file or directory cannot be written under the target."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class VersionResolutionFailure(ScaffoldError):
    """Raised by registry clients when a version lookup fails.

    The resolver always recovers from it by falling back to ``"latest"``.
    """

    def __init__(self, package: str, reason: str = "") -> None:
        self.package = package
        self.reason = reason
        super().__init__(f"Could not resolve a version for {package}: {reason}")


class InstallFailure(ScaffoldError):
    """Raised when the requested dependency install fails."""

    def __init__(self, target: Path, reason: str = "") -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to install dependencies in {target}: {reason}")


class GitInitFailure(ScaffoldError):
    """Signals a failed repository initialisation.  Never fatal to a run."""

    def __init__(self, target: Path, reason: str = "") -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Git initialization failed in {target}: {reason}")
