# tests/integration/test_auth_api.py
from botocore.exceptions import ClientError

from authgateway.app.core.errors import QueueUnavailableError

SIGNUP = {
    "username": "jdoe",
    "password": "secret1",
    "email": "jdoe@gmail.com",
    "name": "John Doe",
}


def test_login_returns_tokens(client):
    r = client.post("/login", json={"username": "jdoe", "password": "secret1"})
    assert r.status_code == 200, r.text
    assert r.json() == {"accessToken": "access-token", "idToken": "id-token", "refreshToken": "refresh-token"}


def test_signup_created(client, repository, queue):
    r = client.post("/signup", json={**SIGNUP, "phoneNumber": "+5573999999999"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["cognitoSub"] == "sub-123"
    assert body["username"] == "jdoe"
    assert body["userConfirmed"] is False
    assert body["message"] == "User registered successfully. Please check your email for confirmation code."
    repository.create.assert_awaited_once()
    queue.send_user_signup_message.assert_awaited_once()


def test_signup_validation_lists_every_field(client, identity):
    r = client.post("/signup", json={"username": "ab", "password": "x", "email": "bad", "name": "Solo"})
    assert r.status_code == 400
    errors = r.json()["errors"]
    assert len(errors) >= 4
    assert {"username", "password", "email", "name"} <= {e["field"] for e in errors}
    identity.sign_up.assert_not_awaited()


def test_missing_body_is_400(client):
    r = client.post("/confirm-signup", json={})
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"username", "confirmationCode"}


def test_provider_error_message_and_status_pass_through(client, identity):
    identity.sign_in.side_effect = ClientError(
        {
            "Error": {"Code": "NotAuthorizedException", "Message": "Incorrect username or password."},
            "ResponseMetadata": {"HTTPStatusCode": 400},
        },
        "InitiateAuth",
    )
    r = client.post("/login", json={"username": "jdoe", "password": "wrong1"})
    assert r.status_code == 400
    assert r.json() == {"error": "Incorrect username or password."}


def test_unexpected_error_defaults_to_400(client, queue):
    queue.send_user_login_message.side_effect = QueueUnavailableError()
    r = client.post("/login", json={"username": "jdoe", "password": "secret1"})
    assert r.status_code == 400
    assert r.json() == {"error": "Queue service is not available"}


def test_confirm_signup_falsy_result_is_500(client, identity):
    identity.confirm_sign_up.return_value = False
    r = client.post("/confirm-signup", json={"username": "jdoe", "confirmationCode": "123456"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to confirm user"}


def test_confirm_signup(client, repository):
    r = client.post("/confirm-signup", json={"username": "jdoe", "confirmationCode": "123456"})
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "message": "User confirmed successfully"}
    repository.update_user_confirmation_status.assert_awaited_once_with("jdoe", True)


def test_resend_and_forgot_password(client):
    r = client.post("/resend-confirmation-code", json={"username": "jdoe"})
    assert r.status_code == 200
    assert r.json()["deliveryMethod"] == "EMAIL"

    r = client.post("/forgot-password", json={"username": "jdoe"})
    assert r.status_code == 200
    assert r.json()["deliveryMethod"] == "SMS"


def test_confirm_forgot_password_checks_strength(client, identity):
    weak = {"username": "jdoe", "confirmationCode": "123456", "newPassword": "password"}
    r = client.post("/confirm-forgot-password", json=weak)
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "newPassword"
    identity.confirm_forgot_password.assert_not_awaited()

    r = client.post("/confirm-forgot-password", json={**weak, "newPassword": "Str0ng!pass"})
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_logout_needs_no_body(client):
    r = client.post("/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "User logged out successfully."}
