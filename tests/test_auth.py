"""Tests for the OAuth endpoints."""

from urllib.parse import parse_qs, urlsplit


def test_authorize_redirects_to_strava(client):
    response = client.get("/auth/strava", follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("https://www.strava.com/oauth/authorize?")
    assert "scope=read%2Cactivity%3Aread_all" in location

    query = parse_qs(urlsplit(location).query)
    assert query["client_id"] == ["test_client_id"]
    assert query["response_type"] == ["code"]
    assert query["redirect_uri"] == ["http://localhost:8000/auth/strava/callback"]
    assert query["approval_prompt"] == ["force"]
    assert query["scope"] == ["read,activity:read_all"]


def test_authorize_without_client_id(client, use_settings):
    use_settings(strava_client_id="")

    response = client.get("/auth/strava", follow_redirects=False)

    assert response.status_code == 500
    assert response.json() == {"error": "OAuth configuration missing"}


def test_authorize_without_redirect_uri(client, use_settings):
    use_settings(strava_redirect_uri="")

    response = client.get("/auth/strava", follow_redirects=False)

    assert response.status_code == 500
    assert response.json() == {"error": "OAuth configuration missing"}


def test_callback_without_code(client, fake_strava):
    response = client.get("/auth/strava/callback")

    assert response.status_code == 200
    assert "OAuth Error" in response.text
    assert "Missing authorization code" in response.text
    assert fake_strava.requests == []


def test_callback_with_error_param(client):
    response = client.get("/auth/strava/callback", params={"error": "access_denied"})

    assert response.status_code == 200
    assert "OAuth Error" in response.text
    assert "access_denied" in response.text


def test_callback_escapes_error_param(client):
    response = client.get("/auth/strava/callback", params={"error": "<script>alert(1)</script>"})

    assert response.status_code == 200
    assert "<script>alert(1)" not in response.text


def test_callback_exchanges_code(client, fake_strava):
    """A valid code is exchanged server-side and the token posted to the opener."""
    fake_strava.add("POST", "/oauth/token", json={
        "token_type": "Bearer",
        "access_token": "test_access_token",
        "refresh_token": "test_refresh_token",
        "expires_at": 1700000000,
        "expires_in": 21600,
        "athlete": {"id": 123, "username": "testuser"}
    })

    response = client.get("/auth/strava/callback", params={"code": "test_auth_code"})

    assert response.status_code == 200
    assert "OAuth Success" in response.text
    assert "test_access_token" in response.text
    assert '"athleteId": "123"' in response.text
    assert "window.opener.postMessage" in response.text
    assert '"http://localhost:8000"' in response.text
    assert "test_refresh_token" not in response.text

    [request] = fake_strava.requests
    form = parse_qs(request.content.decode())
    assert form == {
        "client_id": ["test_client_id"],
        "client_secret": ["test_secret"],
        "code": ["test_auth_code"],
        "grant_type": ["authorization_code"]
    }


def test_callback_posts_to_frontend_origin(client, fake_strava, use_settings):
    use_settings(frontend_url="http://localhost:5173/app/")
    fake_strava.add("POST", "/oauth/token", json={"access_token": "tok", "athlete": {"id": 1}})

    response = client.get("/auth/strava/callback", params={"code": "abc"})

    assert '"http://localhost:5173"' in response.text


def test_callback_hides_upstream_failure(client, fake_strava):
    fake_strava.add("POST", "/oauth/token", status_code=400, json={
        "message": "Bad Request",
        "errors": [{"resource": "AuthorizationCode", "field": "code", "code": "invalid"}]
    })

    response = client.get("/auth/strava/callback", params={"code": "invalid_code"})

    assert response.status_code == 200
    assert "OAuth Error" in response.text
    assert "Authentication failed" in response.text
    assert "Bad Request" not in response.text
    assert "400" not in response.text


def test_callback_with_unexpected_token_payload(client, fake_strava):
    fake_strava.add("POST", "/oauth/token", json={"access_token": "tok"})

    response = client.get("/auth/strava/callback", params={"code": "abc"})

    assert "Authentication failed" in response.text


def test_callback_without_client_secret(client, fake_strava, use_settings):
    use_settings(strava_client_secret="")

    response = client.get("/auth/strava/callback", params={"code": "test_code"})

    assert response.status_code == 200
    assert "OAuth Error" in response.text
    assert "Authentication failed" in response.text
    assert fake_strava.requests == []


def test_redirect_flow_success(client, fake_strava, use_settings):
    use_settings(oauth_flow="redirect", frontend_url="http://localhost:5173")
    fake_strava.add("POST", "/oauth/token", json={"access_token": "test_access_token", "athlete": {"id": 123}})

    response = client.get("/auth/strava/callback", params={"code": "abc"}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == (
        "http://localhost:5173/dashboard?access_token=test_access_token&athlete_id=123"
    )


def test_redirect_flow_missing_code(client, use_settings):
    use_settings(oauth_flow="redirect")

    response = client.get("/auth/strava/callback", params={"error": "access_denied"})

    assert response.status_code == 400
    assert response.json() == {"error": "Authorization failed"}


def test_redirect_flow_exchange_failure(client, fake_strava, use_settings):
    use_settings(oauth_flow="redirect")
    fake_strava.add("POST", "/oauth/token", status_code=401, json={"message": "Authorization Error"})

    response = client.get("/auth/strava/callback", params={"code": "abc"}, follow_redirects=False)

    assert response.status_code == 500
    assert response.json() == {"error": "Authentication failed"}
