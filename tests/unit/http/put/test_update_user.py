import orjson

from tests.mock_executors import MockSuccessfulOutput, ok
from tests.unit.conftest import is_request, is_signed_by, request_body


def test_update_user(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"user": {"username": "satoshi"}}),
            call_validation=is_request("PUT", "/v3/users"),
        )
    )

    response = client.update_user(
        email="satoshi@example.com",
        username="satoshi",
        user_data={"theme": "dark", "notifications": True},
    )

    assert response["user"]["username"] == "satoshi"
    sent = request_body(mock_http.call_log[0])
    assert sent is not None
    assert sent["email"] == "satoshi@example.com"
    assert isinstance(sent["userData"], str)
    assert orjson.loads(sent["userData"]) == {"theme": "dark", "notifications": True}
    assert is_signed_by(client.authenticator)(mock_http.call_log[0])


def test_send_verification_email_sends_no_body(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({}),
            call_validation=is_request("PUT", "/v3/emails/send-verification-email"),
        )
    )

    client.send_verification_email()

    _method, _url, headers, body = mock_http.call_log[0].arg_pack
    assert body is None
    assert headers["X-SIGNATURE"] == "muV9vvNg5VzsR4UFKn6Po11cSQpqt4FFvmYRVeFSaxE="
