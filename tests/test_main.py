"""Tests for application assembly: CORS and the debug-only API docs."""

import pytest
from httpx import ASGITransport, AsyncClient

from wishlist.core.config import load_settings
from wishlist.main import create_app

ORIGIN = "https://app.example"


async def _client_for(**overrides) -> AsyncClient:
    application = create_app(load_settings(**overrides))
    return AsyncClient(transport=ASGITransport(app=application), base_url="http://test")


class TestCors:
    @pytest.mark.asyncio
    async def test_preflight_from_allowed_origin(self):
        """Preflight requests are answered without a token."""
        async with await _client_for(cors={"allowed_origins": [ORIGIN]}) as client:
            response = await client.options(
                "/gift",
                headers={
                    "Origin": ORIGIN,
                    "Access-Control-Request-Method": "POST",
                    "Access-Control-Request-Headers": "Authorization, Content-Type",
                },
            )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_unauthorized_response_keeps_cors_headers(self):
        """A browser must be able to read the 401 to know it should log in."""
        async with await _client_for(cors={"allowed_origins": [ORIGIN]}) as client:
            response = await client.get("/gift", headers={"Origin": ORIGIN})
        assert response.status_code == 401
        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_unlisted_origin_gets_no_grant(self):
        async with await _client_for(cors={"allowed_origins": [ORIGIN]}) as client:
            response = await client.get("/gift", headers={"Origin": "https://evil.example"})
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_no_origins_configured_means_no_cors(self):
        async with await _client_for(cors={"allowed_origins": []}) as client:
            response = await client.get("/gift", headers={"Origin": ORIGIN})
        assert response.status_code == 401
        assert "access-control-allow-origin" not in response.headers


class TestApiDocs:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/docs", "/redoc", "/openapi.json"])
    async def test_docs_hidden_without_debug(self, path):
        async with await _client_for(debug=False) as client:
            response = await client.get(path)
        assert response.status_code in (401, 404)

    @pytest.mark.asyncio
    async def test_docs_hidden_even_with_token(self, app, alice, auth_headers):
        """Without debug the docs routes do not exist at all."""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/openapi.json", headers=auth_headers(alice))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_openapi_public_in_debug(self):
        async with await _client_for(debug=True) as client:
            response = await client.get("/openapi.json")
        assert response.status_code == 200
        assert "/gift" in response.json()["paths"]

    @pytest.mark.asyncio
    async def test_docs_page_gets_relaxed_csp_in_debug(self):
        async with await _client_for(debug=True) as client:
            docs = await client.get("/docs")
            api = await client.get("/gift")
        assert docs.status_code == 200
        assert "content-security-policy" not in docs.headers
        assert docs.headers["x-frame-options"] == "DENY"
        assert api.status_code == 401
        assert api.headers["content-security-policy"] == "default-src 'none'; frame-ancestors 'none'"
