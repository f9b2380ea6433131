"""
Integration tests for the verify endpoint.

Each test sends a code first through the API, reads it back from the
recording gateway, then checks it through the API.
"""

import pytest

INVALID_OR_EXPIRED = {"succeeded": False, "error": "Invalid or expired verification code."}


def test_send_then_verify(send_code, verify_code, get_sent_code):
    send_code("user@example.com")
    code = get_sent_code("user@example.com")

    response = verify_code("user@example.com", code)

    assert response.status_code == 200, response.text
    assert response.json() == {"succeeded": True, "message": "Verification successful."}


def test_code_is_single_use(send_code, verify_code, get_sent_code):
    send_code("user@example.com")
    code = get_sent_code("user@example.com")

    verify_code("user@example.com", code)
    response = verify_code("user@example.com", code)

    assert response.status_code == 400
    assert response.json() == INVALID_OR_EXPIRED


def test_verify_is_case_insensitive(send_code, verify_code, get_sent_code):
    send_code("a@b.com")
    code = get_sent_code("a@b.com")

    response = verify_code("A@B.COM", code)

    assert response.status_code == 200


def test_wrong_code_leaves_code_usable(send_code, verify_code, get_sent_code):
    send_code("user@example.com")
    code = get_sent_code("user@example.com")
    wrong = "100000" if code != "100000" else "100001"

    wrong_response = verify_code("user@example.com", wrong)
    right_response = verify_code("user@example.com", code)

    assert wrong_response.status_code == 400
    assert wrong_response.json() == INVALID_OR_EXPIRED
    assert right_response.status_code == 200


def test_verify_without_send(verify_code):
    response = verify_code("nobody@example.com", "123456")

    assert response.status_code == 400
    assert response.json() == INVALID_OR_EXPIRED


def test_codes_are_per_address(send_code, verify_code, get_sent_code):
    send_code("one@example.com")
    send_code("two@example.com")
    code_one = get_sent_code("one@example.com")

    response = verify_code("two@example.com", code_one)

    if code_one != get_sent_code("two@example.com"):
        assert response.status_code == 400
    assert verify_code("one@example.com", code_one).status_code == 200


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "user@example.com"},
        {"code": "123456"},
        {"email": "user@example.com", "code": 123456},
    ],
)
def test_malformed_request_gets_generic_error(api_client, payload):
    response = api_client.post("/api/v1/verification/verify", json=payload)

    assert response.status_code == 400
    assert response.json() == INVALID_OR_EXPIRED
