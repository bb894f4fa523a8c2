import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from portal.config import settings
from portal.modules.auth.schemas import SignUpRequest, SignInRequest
from portal.modules.auth.service import AuthService, clear_auth_cache, display_name

SIGNUP = {
    "email": "kim@example.com",
    "password": "secret1",
    "confirm_password": "secret1",
    "full_name": "Kim Dev",
}


@pytest.fixture(autouse=True)
def empty_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.mark.parametrize("override", [
    {"full_name": "K"},
    {"email": "kim-at-example"},
    {"password": "12345", "confirm_password": "12345"},
    {"confirm_password": "secret2"},
    {"confirm_password": ""},
])
def test_signup_validation(override):
    with pytest.raises(ValidationError):
        SignUpRequest(**{**SIGNUP, **override})


def test_display_name_fallbacks():
    assert display_name({"email": "kim@example.com", "user_metadata": {"full_name": " Kim Dev "}}) == "Kim Dev"
    assert display_name({"email": "kim@example.com", "user_metadata": {}}) == "kim"
    assert display_name({"email": None, "user_metadata": None}) == "Current user"
    assert display_name(None) == "Current user"


def test_sign_up_stores_full_name_and_reports_confirmation(fake_supabase):
    response = AuthService(fake_supabase).sign_up(SignUpRequest(**SIGNUP))

    assert response.confirmation_required is True
    assert response.email == "kim@example.com"
    name, credentials = fake_supabase.auth.calls[0]
    assert name == "sign_up"
    assert credentials["options"]["data"] == {"full_name": "Kim Dev"}


def test_sign_up_existing_user(fake_supabase):
    fake_supabase.auth.error = Exception("User already registered")

    with pytest.raises(HTTPException) as exc:
        AuthService(fake_supabase).sign_up(SignUpRequest(**SIGNUP))
    assert exc.value.detail == "User already exists"


def test_sign_in_returns_session(fake_supabase):
    session = AuthService(fake_supabase).sign_in(SignInRequest(email="hong@example.com", password="secret1"))

    assert session.access_token == "access-token"
    assert session.refresh_token == "refresh-token"
    assert session.display_name == "Hong Gildong"


def test_sign_in_bad_credentials_is_401(fake_supabase):
    fake_supabase.auth.error = Exception("Invalid login credentials")

    with pytest.raises(HTTPException) as exc:
        AuthService(fake_supabase).sign_in(SignInRequest(email="hong@example.com", password="wrong"))
    assert exc.value.status_code == 401


def test_current_user_is_cached_per_token(fake_supabase):
    service = AuthService(fake_supabase)

    first = service.get_current_user("token-a")
    second = service.get_current_user("token-a")

    assert first == second
    assert [c[0] for c in fake_supabase.auth.calls] == ["get_user"]


def test_current_user_invalid_token(fake_supabase):
    fake_supabase.auth.error = Exception("invalid JWT")

    with pytest.raises(HTTPException) as exc:
        AuthService(fake_supabase).get_current_user("bad")
    assert exc.value.status_code == 401


def test_sign_out_failure_reports_false(fake_supabase):
    fake_supabase.auth.error = Exception("network down")
    assert AuthService(fake_supabase).sign_out("token") is False


def test_reset_password_redirects_to_frontend(fake_supabase):
    AuthService(fake_supabase).reset_password("kim@example.com")

    name, email, options = fake_supabase.auth.calls[0]
    assert name == "reset_password_for_email"
    assert email == "kim@example.com"
    assert options == {"redirect_to": f"{settings.frontend_url.rstrip('/')}/reset-password"}


def test_auth_events_forwarded_to_callback(fake_supabase):
    seen = []
    subscription = AuthService(fake_supabase).subscribe_auth_events(lambda event, session: seen.append(event))

    for listener in fake_supabase.auth.listeners:
        listener("SIGNED_IN", None)
    subscription.unsubscribe()

    assert seen == ["SIGNED_IN"]
    assert fake_supabase.auth.listeners == []


def test_signup_route_validation_and_success(client):
    bad = client.post("/api/v1/auth/signup", json={**SIGNUP, "confirm_password": "other"})
    good = client.post("/api/v1/auth/signup", json=SIGNUP)

    assert bad.status_code == 422
    assert good.status_code == 201
    assert good.json()["confirmation_required"] is True


def test_login_and_me_routes(client):
    login = client.post("/api/v1/auth/login", json={"email": "hong@example.com", "password": "secret1"})
    me = client.get("/api/v1/auth/me")

    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"
    assert me.json()["display_name"] == "Hong Gildong"


def test_reset_password_route_rejects_bad_email(client):
    assert client.post("/api/v1/auth/reset-password", json={"email": "nope"}).status_code == 422
    assert client.post("/api/v1/auth/reset-password", json={"email": "kim@example.com"}).status_code == 202


@pytest.mark.parametrize("email", ["hong-at-example", "hong@example"])
def test_sign_in_uses_signup_email_rule(email):
    with pytest.raises(ValidationError):
        SignInRequest(email=email, password="secret1")
