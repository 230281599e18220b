import pytest

PASSWORD = "password123!"

SIGN_UP_BODY = {
    "email": "dev@example.com",
    "password": PASSWORD,
    "confirmPassword": PASSWORD,
    "nickname": "devkim",
    "developerType": "FULLSTACK",
    "hourlyRate": 50000,
    "githubUsername": "devkim-gh",
}


async def _sign_up(client, **overrides):
    return await client.post("/api/v1/auth/signup", json={**SIGN_UP_BODY, **overrides})


async def _sign_in(client, email="dev@example.com", password=PASSWORD):
    return await client.post("/api/v1/auth/signin", json={"email": email, "password": password})


class TestSignUp:
    async def test_sign_up(self, client):
        r = await _sign_up(client)

        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["message"] == "Sign up completed."
        assert "errorCode" not in body
        user = body["data"]
        assert user["email"] == "dev@example.com"
        assert user["developerType"] == "FULLSTACK"
        assert user["subscriptionPlan"] == "FREE"
        assert user["hourlyRate"] == 50000
        assert user["preferredCurrency"] == "KRW"
        assert user["timezone"] == "Asia/Seoul"
        assert user["provider"] == "local"
        assert "password" not in user

    async def test_duplicate_email(self, client):
        await _sign_up(client)

        r = await _sign_up(client, githubUsername=None)

        assert r.status_code == 400
        body = r.json()
        assert body["success"] is False
        assert body["message"] == "Sign up failed: Email is already in use."
        assert "errorCode" not in body

    async def test_password_mismatch(self, client):
        r = await _sign_up(client, confirmPassword="different123!")

        assert r.status_code == 400
        assert r.json()["message"] == "Sign up failed: Passwords do not match."

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"email": "not-an-email"}, "email"),
            ({"password": "short1!"}, "password"),
            ({"password": "onlyletters!!"}, "password"),
            ({"nickname": "a"}, "nickname"),
            ({"developerType": "ASTRONAUT"}, "developerType"),
            ({"hourlyRate": -1}, "hourlyRate"),
        ],
    )
    async def test_validation_errors(self, client, overrides, field):
        r = await _sign_up(client, **overrides)

        assert r.status_code == 400
        body = r.json()
        assert body["errorCode"] == "VALIDATION_ERROR"
        assert body["message"].startswith("Invalid input: ")
        assert field in body["message"]


class TestSignIn:
    async def test_sign_in(self, client, jwt_provider):
        await _sign_up(client)

        r = await _sign_in(client)

        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Signed in successfully."
        tokens = body["data"]
        assert tokens["tokenType"] == "Bearer"
        assert tokens["expiresIn"] == 3600
        assert tokens["user"]["email"] == "dev@example.com"
        assert jwt_provider.validate_token(tokens["accessToken"], "access")
        assert jwt_provider.validate_token(tokens["refreshToken"], "refresh")

    async def test_bad_credentials(self, client):
        await _sign_up(client)

        r = await _sign_in(client, password="wrong-pass1!")

        assert r.status_code == 400
        assert r.json()["message"] == "Sign in failed: Bad credentials"

    async def test_blank_password_is_validation_error(self, client):
        r = await _sign_in(client, password="")

        assert r.status_code == 400
        assert r.json()["errorCode"] == "VALIDATION_ERROR"


class TestRefresh:
    async def test_refresh_rotates_tokens(self, client):
        await _sign_up(client)
        tokens = (await _sign_in(client)).json()["data"]

        r = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})

        assert r.status_code == 200
        assert r.json()["message"] == "Tokens refreshed."
        assert r.json()["data"]["refreshToken"] != tokens["refreshToken"]

        replay = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 400
        assert replay.json()["message"] == "Token refresh failed: Invalid refresh token."

    async def test_refresh_rejects_access_token(self, client):
        await _sign_up(client)
        tokens = (await _sign_in(client)).json()["data"]

        r = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["accessToken"]})

        assert r.status_code == 400

    async def test_blank_refresh_token(self, client):
        r = await client.post("/api/v1/auth/refresh", json={"refreshToken": "   "})

        assert r.status_code == 400
        assert r.json()["errorCode"] == "VALIDATION_ERROR"
        assert "Refresh token is required." in r.json()["message"]


class TestMeAndLogout:
    async def test_me(self, client):
        await _sign_up(client)
        tokens = (await _sign_in(client)).json()["data"]

        r = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})

        assert r.status_code == 200
        assert r.json()["message"] == "Fetched current user."
        assert r.json()["data"]["nickname"] == "devkim"

    async def test_me_requires_token(self, client):
        r = await client.get("/api/v1/auth/me")

        assert r.status_code == 401
        assert r.json()["errorCode"] == "UNAUTHORIZED"

    async def test_me_with_refresh_token_is_rejected(self, client):
        await _sign_up(client)
        tokens = (await _sign_in(client)).json()["data"]

        r = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})

        assert r.status_code == 401

    async def test_me_for_deleted_user(self, client, jwt_provider):
        from devtracker.server.security.principal import UserPrincipal

        token = jwt_provider.generate_access_token(UserPrincipal(id=999))

        r = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert r.status_code == 400
        assert r.json()["message"] == "Get current user failed: User not found."

    async def test_logout_revokes_refresh_tokens(self, client):
        await _sign_up(client)
        tokens = (await _sign_in(client)).json()["data"]

        r = await client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {tokens['accessToken']}"})

        assert r.status_code == 200
        assert r.json()["data"] == "SUCCESS"
        refresh = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert refresh.status_code == 400

    async def test_anonymous_logout(self, client):
        r = await client.post("/api/v1/auth/logout")

        assert r.status_code == 200
        assert r.json()["message"] == "Logged out."


async def test_github_login_entry_point(client):
    r = await client.get("/api/v1/auth/oauth2/github")

    assert r.status_code == 200
    assert r.json()["data"] == "/oauth2/authorization/github"
