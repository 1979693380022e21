"""Package version resolution with a run-scoped cache.

The resolver asks a ``RegistryClient`` for the latest published version of
a package, validates that the answer looks like a semantic version, and
remembers it for the rest of the run.  When neither the primary lookup nor
the ``latest`` dist-tag lookup yields a usable version, the sentinel
``"latest"`` is returned instead.  Sentinels are never cached, so a later
lookup of the same package tries the registry again.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable, Iterable

from blitz_react.errors import VersionResolutionFailure
from blitz_react.protocols import RegistryClient
from blitz_react.utils import print_warning

FALLBACK_VERSION = "latest"

SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+")


def extract_version(raw: str | None) -> str | None:
    """Return the version in *raw* registry output, or ``None`` if unusable.

    Only the first line is considered; surrounding whitespace and quotes are
    dropped.  Empty output, the literal ``latest`` and anything not starting
    with ``<major>.<minor>.<patch>`` are rejected.
    """
    if not raw:
        return None
    lines = raw.strip().splitlines()
    if not lines:
        return None
    text = lines[0].strip().strip("'\"")
    if not text or text == FALLBACK_VERSION:
        return None
    if not SEMVER_RE.match(text):
        return None
    return text


class VersionCache:
    """Package name -> resolved version for one generation run."""

    def __init__(self) -> None:
        self._versions: dict[str, str] = {}

    def get(self, package: str) -> str | None:
        return self._versions.get(package)

    def store(self, package: str, version: str) -> None:
        """Remember *version* for *package*.

        Raises:
            ValueError: If *version* is the fallback sentinel.
        """
        if version == FALLBACK_VERSION:
            raise ValueError(f"Refusing to cache fallback version for {package}")
        self._versions[package] = version

    def __contains__(self, package: object) -> bool:
        return package in self._versions

    def __len__(self) -> int:
        return len(self._versions)


class VersionResolver:
    """Resolves package names to concrete versions, one registry hit per package.

    Args:
        registry: Where versions are looked up.
        cache: Cache to use; a fresh one is created when omitted.
        timeout: Seconds allowed for each individual registry call
            (``None`` disables the limit).
        on_warning: Called with a message whenever a package falls back to
            ``"latest"``.
    """

    def __init__(
        self,
        registry: RegistryClient,
        cache: VersionCache | None = None,
        timeout: float | None = 15.0,
        on_warning: Callable[[str], None] = print_warning,
    ) -> None:
        self.registry = registry
        self.cache = cache if cache is not None else VersionCache()
        self.timeout = timeout
        self.on_warning = on_warning
        self.fallbacks: list[str] = []

    async def resolve(self, package: str) -> str:
        """Return the version for *package*, never raising."""
        cached = self.cache.get(package)
        if cached is not None:
            return cached

        reasons: list[str] = []
        version = await self._attempt(
            package, lambda: self.registry.query_latest_version(package), reasons
        )
        if version is None:
            version = await self._attempt(
                package, lambda: self.registry.query_dist_tag(package, "latest"), reasons
            )

        if version is None:
            self.fallbacks.append(package)
            detail = f" ({'; '.join(reasons)})" if reasons else ""
            self.on_warning(
                f"Warning: Could not fetch latest version for {package}, "
                f"using '{FALLBACK_VERSION}'{detail}"
            )
            return FALLBACK_VERSION

        self.cache.store(package, version)
        return version

    async def resolve_all(self, packages: Iterable[str]) -> dict[str, str]:
        """Resolve every package concurrently.

        Duplicate names are looked up once.  The returned mapping keeps the
        order in which names first appear in *packages*.
        """
        unique = list(dict.fromkeys(packages))
        versions = await asyncio.gather(*(self.resolve(name) for name in unique))
        return dict(zip(unique, versions))

    async def _attempt(
        self,
        package: str,
        query: Callable[[], Awaitable[str]],
        reasons: list[str],
    ) -> str | None:
        try:
            raw = await asyncio.wait_for(query(), timeout=self.timeout)
        except asyncio.TimeoutError:
            reasons.append(f"lookup timed out after {self.timeout}s")
            return None
        except VersionResolutionFailure as exc:
            reasons.append(exc.reason or str(exc))
            return None
        except Exception as exc:  # noqa: BLE001
            reasons.append(f"unexpected error: {exc}")
            return None

        version = extract_version(raw)
        if version is None:
            reasons.append(f"registry returned {raw.strip()!r}" if raw else "empty response")
        return version
