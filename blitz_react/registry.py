"""npm registry clients used for version lookups.

Two interchangeable backends implement ``RegistryClient``:

- ``NpmCliRegistry`` shells out to ``npm show`` / ``npm view`` and therefore
  honours the user's ``.npmrc`` (mirrors, auth, proxies).
- ``HttpRegistry`` talks to the registry's JSON API with ``httpx`` and needs
  no local npm.

Both raise ``VersionResolutionFailure`` on any failure and leave validation
and fallback decisions to ``VersionResolver``.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from blitz_react.config import RegistryConfig
from blitz_react.errors import VersionResolutionFailure
from blitz_react.protocols import RegistryClient
from blitz_react.utils import run_command


class NpmCliRegistry:
    """Version lookups through the ``npm`` command line client."""

    def __init__(self, npm: str = "npm", timeout: float = 15.0) -> None:
        self.npm = npm
        self.timeout = timeout

    async def query_latest_version(self, package: str) -> str:
        return await self._npm(package, "show", package, "version")

    async def query_dist_tag(self, package: str, tag: str = "latest") -> str:
        return await self._npm(package, "view", package, f"dist-tags.{tag}")

    async def _npm(self, package: str, *args: str) -> str:
        returncode, stdout, stderr = await run_command(
            [self.npm, *args], timeout=self.timeout
        )
        if returncode != 0:
            raise VersionResolutionFailure(
                package, stderr or f"npm exited with code {returncode}"
            )
        return stdout


class HttpRegistry:
    """Version lookups against the npm registry HTTP API.

    Args:
        base_url: Registry root, e.g. ``https://registry.npmjs.org``.
        timeout: Per-request timeout in seconds.
        transport: Optional ``httpx`` transport, mainly for tests.
    """

    def __init__(
        self,
        base_url: str = "https://registry.npmjs.org",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self.transport,
            headers={"Accept": "application/json"},
        )

    async def query_latest_version(self, package: str) -> str:
        data = await self._get_json(package, f"/{_encode_package(package)}/latest")
        return str(data.get("version") or "")

    async def query_dist_tag(self, package: str, tag: str = "latest") -> str:
        data = await self._get_json(
            package, f"/-/package/{_encode_package(package)}/dist-tags"
        )
        return str(data.get(tag) or "")

    async def _get_json(self, package: str, path: str) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.get(path)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise VersionResolutionFailure(
                package, f"registry request timed out after {self.timeout}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise VersionResolutionFailure(
                package, f"registry returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise VersionResolutionFailure(package, f"registry request failed: {exc}") from exc
        except ValueError as exc:
            raise VersionResolutionFailure(package, "registry returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise VersionResolutionFailure(package, "unexpected registry payload")
        return data


def _encode_package(package: str) -> str:
    """Encode a package name for a registry URL (``@scope/name`` -> ``@scope%2Fname``)."""
    return quote(package, safe="@")


def build_registry(config: RegistryConfig) -> RegistryClient:
    """Return the registry client selected by *config*."""
    if config.backend == "http":
        return HttpRegistry(base_url=config.url, timeout=config.timeout)
    return NpmCliRegistry(timeout=config.timeout)
