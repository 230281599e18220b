"""
Unit tests for GitHubApiClient using respx-mocked transports.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import respx

from devtracker.github import (
    GitHubApiClient,
    GitHubApiError,
    GitHubOAuthError,
    GitHubRateLimitError,
)

API = "http://mock-github-api"
TOKEN_URI = "http://mock-github/login/oauth/access_token"
AUTHORIZE_URI = "http://mock-github/login/oauth/authorize"


@pytest.fixture
async def github_client():
    client = GitHubApiClient(
        client_id="cid",
        client_secret="csecret",
        api_base_url=f"{API}/",
        authorization_uri=AUTHORIZE_URI,
        token_uri=TOKEN_URI,
    )
    yield client
    await client.aclose()


class TestAuthorizationUrl:
    def test_contains_oauth_parameters(self, github_client):
        url = github_client.build_authorization_url(state="abc", redirect_uri="http://localhost/oauth2/callback/github")

        parts = urlsplit(url)
        query = parse_qs(parts.query)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == AUTHORIZE_URI
        assert query["client_id"] == ["cid"]
        assert query["state"] == ["abc"]
        assert query["scope"] == ["read:user user:email"]
        assert query["redirect_uri"] == ["http://localhost/oauth2/callback/github"]


class TestTokenExchange:
    @respx.mock
    async def test_exchange_success(self, github_client):
        route = respx.post(TOKEN_URI).mock(
            return_value=httpx.Response(
                200, json={"access_token": "gho_abc", "token_type": "bearer", "scope": "read:user,user:email"}
            )
        )

        token = await github_client.exchange_code_for_token(code="the-code", redirect_uri="http://localhost/cb")

        assert token.access_token == "gho_abc"
        assert token.scopes == ["read:user", "user:email"]
        sent = parse_qs(route.calls.last.request.content.decode())
        assert sent["code"] == ["the-code"]
        assert sent["client_secret"] == ["csecret"]
        assert route.calls.last.request.headers["Accept"] == "application/json"

    @respx.mock
    async def test_exchange_refused(self, github_client):
        respx.post(TOKEN_URI).mock(
            return_value=httpx.Response(
                200, json={"error": "bad_verification_code", "error_description": "The code is incorrect."}
            )
        )

        with pytest.raises(GitHubOAuthError) as exc_info:
            await github_client.exchange_code_for_token(code="stale", redirect_uri="http://localhost/cb")

        assert exc_info.value.error == "bad_verification_code"
        assert str(exc_info.value) == "The code is incorrect."


class TestRestApi:
    @respx.mock
    async def test_get_authenticated_user(self, github_client):
        route = respx.get(f"{API}/user").mock(
            return_value=httpx.Response(
                200,
                json={"id": 583231, "login": "octocat", "name": None, "email": None, "company": "GitHub"},
            )
        )

        user = await github_client.get_authenticated_user("gho_abc")

        headers = route.calls.last.request.headers
        assert headers["Authorization"] == "Bearer gho_abc"
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert user.login == "octocat"
        attributes = user.to_attributes()
        assert attributes["id"] == 583231
        assert attributes["company"] == "GitHub"

    @respx.mock
    async def test_primary_verified_email_preferred(self, github_client):
        respx.get(f"{API}/user/emails").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"email": "old@example.com", "primary": False, "verified": True},
                    {"email": "unverified@example.com", "primary": True, "verified": False},
                    {"email": "main@example.com", "primary": True, "verified": True},
                ],
            )
        )

        assert await github_client.get_primary_email("gho_abc") == "main@example.com"

    @respx.mock
    async def test_falls_back_to_any_verified_email(self, github_client):
        respx.get(f"{API}/user/emails").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"email": "unverified@example.com", "primary": True, "verified": False},
                    {"email": "other@example.com", "primary": False, "verified": True},
                ],
            )
        )

        assert await github_client.get_primary_email("gho_abc") == "other@example.com"

    @respx.mock
    async def test_no_verified_email(self, github_client):
        respx.get(f"{API}/user/emails").mock(return_value=httpx.Response(200, json=[]))

        assert await github_client.get_primary_email("gho_abc") is None


class TestErrors:
    @respx.mock
    async def test_http_error_maps_to_api_error(self, github_client):
        respx.get(f"{API}/user").mock(return_value=httpx.Response(401, json={"message": "Bad credentials"}))

        with pytest.raises(GitHubApiError) as exc_info:
            await github_client.get_authenticated_user("expired")

        assert not isinstance(exc_info.value, GitHubRateLimitError)
        assert exc_info.value.status_code == 401
        assert "Bad credentials" in exc_info.value.details

    @respx.mock
    async def test_transport_error_maps_to_api_error(self, github_client):
        respx.get(f"{API}/user").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(GitHubApiError) as exc_info:
            await github_client.get_authenticated_user("gho_abc")

        assert exc_info.value.status_code is None

    @respx.mock
    async def test_rate_limit_exhausted(self, github_client):
        respx.get(f"{API}/user").mock(
            return_value=httpx.Response(
                403,
                headers={
                    "X-RateLimit-Limit": "60",
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": "1700000000",
                },
                json={"message": "API rate limit exceeded"},
            )
        )

        with pytest.raises(GitHubRateLimitError) as exc_info:
            await github_client.get_authenticated_user("gho_abc")

        assert exc_info.value.limit == 60
        assert exc_info.value.reset_at == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    @respx.mock
    async def test_secondary_rate_limit_on_429(self, github_client):
        respx.get(f"{API}/user").mock(return_value=httpx.Response(429, headers={"Retry-After": "30"}))

        with pytest.raises(GitHubRateLimitError) as exc_info:
            await github_client.get_authenticated_user("gho_abc")

        assert exc_info.value.status_code == 429
        assert exc_info.value.limit is None

    @respx.mock
    async def test_plain_forbidden_is_not_rate_limit(self, github_client):
        respx.get(f"{API}/user").mock(
            return_value=httpx.Response(403, headers={"X-RateLimit-Remaining": "57"}, json={"message": "Forbidden"})
        )

        with pytest.raises(GitHubApiError) as exc_info:
            await github_client.get_authenticated_user("gho_abc")

        assert not isinstance(exc_info.value, GitHubRateLimitError)
        assert exc_info.value.status_code == 403

    @respx.mock
    async def test_non_json_token_response(self, github_client):
        respx.post(TOKEN_URI).mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>", headers={"Content-Type": "text/html"})
        )

        with pytest.raises(GitHubApiError) as exc_info:
            await github_client.exchange_code_for_token(code="c", redirect_uri="http://localhost/cb")

        assert exc_info.value.status_code == 200
        assert "maintenance" in exc_info.value.details

    @respx.mock
    async def test_unexpected_user_payload(self, github_client):
        respx.get(f"{API}/user").mock(return_value=httpx.Response(200, json={"message": "no id here"}))

        with pytest.raises(GitHubApiError, match="GitHubUser"):
            await github_client.get_authenticated_user("gho_abc")

    @respx.mock
    async def test_unexpected_emails_payload(self, github_client):
        respx.get(f"{API}/user/emails").mock(return_value=httpx.Response(200, json={"message": "not a list"}))

        with pytest.raises(GitHubApiError):
            await github_client.list_user_emails("gho_abc")


async def test_aclose_leaves_injected_client_open():
    http_client = httpx.AsyncClient()
    client = GitHubApiClient(client_id="cid", client_secret="s", client=http_client)

    await client.aclose()

    assert http_client.is_closed is False
    await http_client.aclose()
