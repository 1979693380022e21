"""Tests for the npm registry clients (blitz_react.registry).

HttpRegistry is exercised against ``httpx.MockTransport``; NpmCliRegistry
with ``run_command`` patched so no npm process is spawned.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from blitz_react.config import RegistryConfig
from blitz_react.errors import VersionResolutionFailure
from blitz_react.protocols import RegistryClient
from blitz_react.registry import (
    HttpRegistry,
    NpmCliRegistry,
    _encode_package,
    build_registry,
)


def _registry(handler) -> HttpRegistry:
    return HttpRegistry(
        base_url="https://registry.example.com/",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


# ---------------------------------------------------------------------------
# HttpRegistry
# ---------------------------------------------------------------------------


class TestHttpRegistry:
    @pytest.mark.unit
    def test_encode_scoped_package(self):
        assert _encode_package("@types/react") == "@types%2Freact"
        assert _encode_package("react-dom") == "react-dom"

    @pytest.mark.unit
    def test_base_url_trailing_slash_stripped(self):
        assert HttpRegistry("https://registry.example.com/").base_url == (
            "https://registry.example.com"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_latest_version(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "react", "version": "18.3.1"})

        assert await _registry(handler).query_latest_version("react") == "18.3.1"
        assert seen[0].url.host == "registry.example.com"
        assert seen[0].url.path == "/react/latest"
        assert seen[0].headers["accept"] == "application/json"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dist_tag(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.startswith("/-/package/")
            assert request.url.path.endswith("/dist-tags")
            return httpx.Response(200, json={"latest": "5.6.3", "beta": "5.7.0-beta"})

        registry = _registry(handler)
        assert await registry.query_dist_tag("typescript") == "5.6.3"
        assert await registry.query_dist_tag("typescript", "beta") == "5.7.0-beta"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_field_returns_empty(self):
        registry = _registry(lambda request: httpx.Response(200, json={"name": "react"}))
        assert await registry.query_latest_version("react") == ""
        assert await registry.query_dist_tag("react", "next") == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_status(self):
        registry = _registry(lambda request: httpx.Response(404, json={"error": "Not found"}))
        with pytest.raises(VersionResolutionFailure, match="HTTP 404") as exc_info:
            await registry.query_latest_version("no-such-package")
        assert exc_info.value.package == "no-such-package"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(VersionResolutionFailure, match="request failed"):
            await _registry(handler).query_latest_version("react")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(VersionResolutionFailure, match="timed out"):
            await _registry(handler).query_latest_version("react")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_json(self):
        registry = _registry(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(VersionResolutionFailure, match="invalid JSON"):
            await registry.query_latest_version("react")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_object_payload(self):
        registry = _registry(lambda request: httpx.Response(200, json=["18.3.1"]))
        with pytest.raises(VersionResolutionFailure, match="unexpected registry payload"):
            await registry.query_latest_version("react")


# ---------------------------------------------------------------------------
# NpmCliRegistry
# ---------------------------------------------------------------------------


class TestNpmCliRegistry:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_show_version(self):
        with patch(
            "blitz_react.registry.run_command",
            new=AsyncMock(return_value=(0, "18.3.1", "")),
        ) as mock_run:
            result = await NpmCliRegistry(timeout=7).query_latest_version("react")

        assert result == "18.3.1"
        mock_run.assert_awaited_once_with(["npm", "show", "react", "version"], timeout=7)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_view_dist_tag(self):
        with patch(
            "blitz_react.registry.run_command",
            new=AsyncMock(return_value=(0, "5.6.3", "")),
        ) as mock_run:
            result = await NpmCliRegistry().query_dist_tag("typescript")

        assert result == "5.6.3"
        assert mock_run.await_args.args[0] == ["npm", "view", "typescript", "dist-tags.latest"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self):
        with patch(
            "blitz_react.registry.run_command",
            new=AsyncMock(return_value=(1, "", "npm ERR! code E404")),
        ):
            with pytest.raises(VersionResolutionFailure, match="E404"):
                await NpmCliRegistry().query_latest_version("no-such-package")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_npm_reports_exit_code(self):
        with patch(
            "blitz_react.registry.run_command",
            new=AsyncMock(return_value=(-1, "", "")),
        ):
            with pytest.raises(VersionResolutionFailure, match="exited with code -1"):
                await NpmCliRegistry().query_latest_version("react")


# ---------------------------------------------------------------------------
# build_registry
# ---------------------------------------------------------------------------


class TestBuildRegistry:
    @pytest.mark.unit
    def test_npm_backend(self):
        registry = build_registry(RegistryConfig(timeout=3))
        assert isinstance(registry, NpmCliRegistry)
        assert registry.timeout == 3
        assert isinstance(registry, RegistryClient)

    @pytest.mark.unit
    def test_http_backend(self):
        registry = build_registry(
            RegistryConfig(backend="http", url="https://npm.example.com", timeout=4)
        )
        assert isinstance(registry, HttpRegistry)
        assert registry.base_url == "https://npm.example.com"
        assert registry.timeout == 4
