from conftest import API, PNG, auth, login, register, token_from


def test_register_returns_account_without_secrets(client, minio, outbox):
    res = register(client, "Ana ", email="ANA@x.com", full_name="Ana", cover=True)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    data = body["data"]
    assert data["username"] == "ana"
    assert data["email"] == "ana@x.com"
    assert data["fullName"] == "Ana"
    assert data["isVerifiedEmail"] is False
    assert data["avatar"]["url"].startswith("http://assets.test/")
    assert data["coverImage"]["publicId"].startswith("users/cover-images/")
    for secret in ("password", "passwordHash", "refreshToken", "emailToken"):
        assert secret not in data

    assert len(minio.objects) == 2
    assert len(outbox) == 1
    assert outbox[0].to == "ana@x.com"
    assert outbox[0].subject == "Verify Email"


def test_register_requires_every_field(client):
    res = client.post(
        f"{API}/users/register",
        data={"username": "ana", "email": "ana@x.com", "password": "pw"},
        files={"avatar": ("a.png", PNG, "image/png")},
    )
    assert res.status_code == 400
    assert res.json() == {
        "statusCode": 400,
        "success": False,
        "data": None,
        "message": "All fields are required.",
    }


def test_register_requires_avatar(client, minio):
    res = client.post(
        f"{API}/users/register",
        data={"username": "ana", "email": "ana@x.com", "fullName": "Ana", "password": "pw"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Avatar is required."
    assert minio.objects == {}


def test_register_rejects_bad_email(client):
    res = register(client, "ana", email="not-an-email")
    assert res.status_code == 400
    assert res.json()["message"] == "Email is not valid."


def test_register_rejects_duplicate_username_or_email(client):
    assert register(client, "ana").status_code == 201

    same_name = register(client, "ana", email="other@x.com")
    same_email = register(client, "bob", email="ana@x.com")

    assert same_name.status_code == 401
    assert same_email.status_code == 401
    assert same_name.json()["message"] == "User with email or username already exists."


def test_login_sets_cookies_and_returns_tokens(client):
    register(client, "ana")
    res = login(client, "ana", "pw")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["user"]["username"] == "ana"
    assert client.cookies.get("accessToken") == data["accessToken"]
    assert client.cookies.get("refreshToken") == data["refreshToken"]


def test_login_by_email(client):
    register(client, "ana")
    res = client.post(f"{API}/users/login", json={"email": "ana@x.com", "password": "pw"})
    assert res.status_code == 200


def test_login_wrong_password(client):
    register(client, "ana")
    res = login(client, "ana", "nope")
    assert res.status_code == 401
    assert res.json()["message"] == "Password is not valid."


def test_login_unknown_user(client):
    res = login(client, "ghost", "pw")
    assert res.status_code == 404
    assert res.json()["message"] == "User does not exist."


def test_login_needs_identity(client):
    res = client.post(f"{API}/users/login", json={"password": "pw"})
    assert res.status_code == 400
    assert res.json()["message"] == "Email or username is required."


def test_guarded_route_without_token(client):
    res = client.get(f"{API}/users/current-user")
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_guarded_route_with_garbage_token(client):
    res = client.get(f"{API}/users/current-user", headers={"Authorization": "Bearer abc.def.ghi"})
    assert res.status_code == 401


def test_unauthenticated_mutation_has_no_side_effect(client):
    headers = auth(client, "ana")
    res = client.post(f"{API}/tweets/", json={"content": "hello"})
    assert res.status_code == 401

    uid = client.get(f"{API}/users/current-user", headers=headers).json()["data"]["id"]
    assert client.get(f"{API}/tweets/user/{uid}", headers=headers).status_code == 404


def test_cookie_session_is_accepted(client):
    register(client, "ana")
    login(client, "ana")
    res = client.get(f"{API}/users/current-user")
    assert res.status_code == 200
    assert res.json()["data"]["username"] == "ana"


def test_refresh_rotates_and_rejects_stale_token(client):
    register(client, "ana")
    first = login(client, "ana").json()["data"]["refreshToken"]
    client.cookies.clear()

    res = client.post(f"{API}/users/refresh-token", json={"refreshToken": first})
    assert res.status_code == 200
    second = res.json()["data"]["refreshToken"]
    assert second and second != first
    client.cookies.clear()

    stale = client.post(f"{API}/users/refresh-token", json={"refreshToken": first})
    assert stale.status_code == 401
    assert stale.json()["message"] == "Refresh token is expired or used."

    again = client.post(f"{API}/users/refresh-token", json={"refreshToken": second})
    assert again.status_code == 200


def test_refresh_from_cookie(client):
    register(client, "ana")
    login(client, "ana")
    res = client.post(f"{API}/users/refresh-token")
    assert res.status_code == 200
    assert res.json()["data"]["accessToken"]


def test_refresh_without_token(client):
    res = client.post(f"{API}/users/refresh-token")
    assert res.status_code == 401


def test_logout_invalidates_refresh_token(client):
    register(client, "ana")
    data = login(client, "ana").json()["data"]
    client.cookies.clear()
    headers = {"Authorization": f"Bearer {data['accessToken']}"}

    res = client.post(f"{API}/users/logout", headers=headers)
    assert res.status_code == 200
    assert "accessToken=" in res.headers.get("set-cookie", "")

    res = client.post(f"{API}/users/refresh-token", json={"refreshToken": data["refreshToken"]})
    assert res.status_code == 401


def test_confirm_email(client, outbox):
    register(client, "ana")
    token = token_from(outbox[0])

    res = client.get(f"{API}/users/confirm-email", params={"emailToken": token})
    assert res.status_code == 200

    again = client.get(f"{API}/users/confirm-email", params={"emailToken": token})
    assert again.status_code == 401
    assert again.json()["message"] == "Email is already verified."

    headers = auth(client, "bob")
    me = client.get(f"{API}/users/current-user", headers=headers).json()["data"]
    assert me["isVerifiedEmail"] is False


def test_confirm_email_needs_token(client):
    res = client.get(f"{API}/users/confirm-email")
    assert res.status_code == 400
    assert res.json()["message"] == "Email token is needed."


def test_confirm_email_with_forged_token(client):
    res = client.get(f"{API}/users/confirm-email", params={"emailToken": "forged"})
    assert res.status_code == 401


def test_change_password(client):
    headers = auth(client, "ana")

    wrong = client.post(
        f"{API}/users/change-password",
        json={"oldPassword": "bad", "newPassword": "new"},
        headers=headers,
    )
    assert wrong.status_code == 400

    res = client.post(
        f"{API}/users/change-password",
        json={"oldPassword": "pw", "newPassword": "new"},
        headers=headers,
    )
    assert res.status_code == 200
    assert login(client, "ana", "pw").status_code == 401
    assert login(client, "ana", "new").status_code == 200


def test_forgot_and_reset_password(client, outbox):
    register(client, "ana")
    outbox.clear()

    res = client.post(f"{API}/users/forgot-password", json={"email": "ana@x.com"})
    assert res.status_code == 200
    assert outbox[0].subject == "Reset Password"
    token = token_from(outbox[0])

    res = client.post(f"{API}/users/reset-password", json={"token": token, "newPassword": "fresh"})
    assert res.status_code == 200
    assert login(client, "ana", "fresh").status_code == 200

    reused = client.post(f"{API}/users/reset-password", json={"token": token, "newPassword": "x"})
    assert reused.status_code == 401


def test_forgot_password_unknown_email(client):
    res = client.post(f"{API}/users/forgot-password", json={"email": "ghost@x.com"})
    assert res.status_code == 404


def test_email_token_cannot_reset_password(client, outbox):
    register(client, "ana")
    verification = token_from(outbox[0])
    res = client.post(f"{API}/users/reset-password", json={"token": verification, "newPassword": "x"})
    assert res.status_code == 401
