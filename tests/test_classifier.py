from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from courier import (
    AuthenticationError,
    RequestCancelledError,
    RequestFailedError,
    ValidationFailedError,
)
from courier.clients.classifier import (
    AuthFailure,
    Cancelled,
    GenericFailure,
    PassThrough,
    ResponseClassifier,
    Success,
    ValidationFailure,
)
from courier.models import BareError, EnvelopedError, NoBody, ResponseEnvelope, parse_error_body

_REQUEST = httpx.Request("GET", "https://api.example/api/users")


def _response(status: int, body: Any = None, *, text: str | None = None) -> httpx.Response:
    if text is not None:
        return httpx.Response(status, text=text, request=_REQUEST)
    if body is None:
        return httpx.Response(status, request=_REQUEST)
    return httpx.Response(status, json=body, request=_REQUEST)


class _Notices:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)


class _Harness:
    def __init__(self, *, logout_raises: bool = False) -> None:
        self.notifier = _Notices()
        self.logouts = 0
        self._logout_raises = logout_raises
        self.classifier = ResponseClassifier(notifier=self.notifier, on_auth_failure=self.logout)

    def logout(self) -> None:
        self.logouts += 1
        if self._logout_raises:
            raise RuntimeError("session store unavailable")

    def run(self, response: httpx.Response, **kwargs: Any) -> Any:
        return self.classifier.settle(self.classifier.classify_response(response, **kwargs))


# =============================================================================
# Received responses
# =============================================================================


def test_bare_resource_is_success() -> None:
    h = _Harness()
    body = {"id": 1, "name": "John"}
    assert h.classifier.classify_response(_response(200, body)) == Success(body)
    assert h.run(_response(201, [1, 2])) == [1, 2]
    assert h.notifier.messages == []


def test_enveloped_success_returns_full_body() -> None:
    h = _Harness()
    body = {"code": 0, "data": {"id": 1}, "message": "ok"}
    assert h.run(_response(200, body)) == body


def test_enveloped_failure_code_on_200() -> None:
    h = _Harness()
    outcome = h.classifier.classify_response(_response(200, {"code": 500, "message": "boom"}))
    assert isinstance(outcome, GenericFailure)
    assert outcome.message == "boom"

    with pytest.raises(RequestFailedError) as exc_info:
        h.classifier.settle(outcome)
    assert exc_info.value.body == {"code": 500, "message": "boom"}
    assert h.notifier.messages == ["boom"]


def test_enveloped_failure_without_message_uses_fallback() -> None:
    h = _Harness()
    with pytest.raises(RequestFailedError) as exc_info:
        h.run(_response(200, {"code": 7}))
    assert exc_info.value.message == "An error occurred"


def test_auth_code_on_200_logs_out() -> None:
    h = _Harness()
    body = {"code": 401, "message": "expired"}
    assert isinstance(h.classifier.classify_response(_response(200, body)), AuthFailure)

    with pytest.raises(AuthenticationError) as exc_info:
        h.run(_response(200, body))
    assert exc_info.value.body == body
    assert h.logouts == 1
    assert h.notifier.messages == ["Authentication failed. Please login again."]


def test_no_content_is_not_a_success() -> None:
    h = _Harness()
    outcome = h.classifier.classify_response(_response(204))
    assert isinstance(outcome, GenericFailure)
    assert outcome.message == "An error occurred"


def test_401_without_body() -> None:
    h = _Harness()
    with pytest.raises(AuthenticationError) as exc_info:
        h.run(_response(401))

    assert exc_info.value.body == {"message": "Unauthorized"}
    assert exc_info.value.status_code == 401
    assert h.logouts == 1
    assert h.notifier.messages == ["Authentication failed. Please login again."]


def test_401_with_body_keeps_body() -> None:
    h = _Harness()
    with pytest.raises(AuthenticationError) as exc_info:
        h.run(_response(401, {"message": "Token expired"}))
    assert exc_info.value.body == {"message": "Token expired"}
    assert exc_info.value.message == "Authentication failed. Please login again."


def test_logout_failure_still_rejects(caplog: pytest.LogCaptureFixture) -> None:
    h = _Harness(logout_raises=True)
    with caplog.at_level(logging.WARNING, logger="courier"):
        with pytest.raises(AuthenticationError):
            h.run(_response(401))

    assert h.logouts == 1
    assert "Logout callback failed" in caplog.text


def test_422_uses_first_field_error() -> None:
    h = _Harness()
    body = {"errors": {"email": ["is required", "is invalid"], "name": ["too short"]}}

    outcome = h.classifier.classify_response(_response(422, body))
    assert outcome == ValidationFailure(
        "is required",
        body=body,
        field_errors={"email": ["is required", "is invalid"], "name": ["too short"]},
    )

    with pytest.raises(ValidationFailedError) as exc_info:
        h.run(_response(422, body))
    assert exc_info.value.body == body
    assert exc_info.value.status_code == 422
    assert h.notifier.messages == ["is required"]
    assert h.logouts == 0


def test_422_message_fallbacks() -> None:
    h = _Harness()
    with_message = h.classifier.classify_response(_response(422, {"message": "Bad input"}))
    assert isinstance(with_message, ValidationFailure)
    assert with_message.message == "Bad input"

    empty = h.classifier.classify_response(_response(422))
    assert isinstance(empty, ValidationFailure)
    assert empty.message == "Validation error"


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"message": "Server exploded"}, "Server exploded"),
        ({"error": "Not found"}, "Not found"),
        ({"message": "", "error": "Fallback"}, "Fallback"),
        ({"detail": "unknown shape"}, "Request failed with status code 500"),
    ],
)
def test_generic_failure_messages(body: Any, expected: str) -> None:
    h = _Harness()
    with pytest.raises(RequestFailedError) as exc_info:
        h.run(_response(500, body))
    assert exc_info.value.message == expected
    assert exc_info.value.body == body
    assert exc_info.value.status_code == 500
    assert h.notifier.messages == [expected]


def test_generic_failure_without_body_carries_status_error() -> None:
    h = _Harness()
    with pytest.raises(RequestFailedError) as exc_info:
        h.run(_response(503))
    assert exc_info.value.message == "Request failed with status code 503"
    assert isinstance(exc_info.value.body, httpx.HTTPStatusError)
    assert exc_info.value.transport_error is exc_info.value.body


def test_text_error_body_kept_verbatim() -> None:
    h = _Harness()
    with pytest.raises(RequestFailedError) as exc_info:
        h.run(_response(502, text="<html>Bad gateway</html>"))
    assert exc_info.value.body == "<html>Bad gateway</html>"
    assert exc_info.value.message == "Request failed with status code 502"


@pytest.mark.parametrize("status", [200, 401, 404, 500])
def test_blob_passes_through_regardless_of_status(status: int) -> None:
    h = _Harness()
    response = httpx.Response(status, content=b"\x89PNG", request=_REQUEST)

    outcome = h.classifier.classify_response(response, response_type="blob")
    assert outcome == PassThrough(response)
    assert h.run(response, response_type="blob") is response
    assert h.notifier.messages == []
    assert h.logouts == 0


# =============================================================================
# Transport errors and cancellation
# =============================================================================


def test_network_error() -> None:
    h = _Harness()
    exc = httpx.ConnectError("Connection refused", request=_REQUEST)

    outcome = h.classifier.classify_transport_error(exc)
    assert isinstance(outcome, GenericFailure)
    with pytest.raises(RequestFailedError) as exc_info:
        h.classifier.settle(outcome)
    assert exc_info.value.message == "Connection refused"
    assert exc_info.value.body is exc
    assert exc_info.value.transport_error is exc
    assert h.notifier.messages == ["Connection refused"]


def test_network_error_without_text() -> None:
    h = _Harness()
    outcome = h.classifier.classify_transport_error(httpx.ReadTimeout(""))
    assert isinstance(outcome, GenericFailure)
    assert outcome.message == "Network error"


def test_status_error_with_response_is_classified_as_response() -> None:
    h = _Harness()
    response = _response(422, {"errors": {"email": ["taken"]}})
    exc = httpx.HTTPStatusError("422", request=_REQUEST, response=response)

    outcome = h.classifier.classify_transport_error(exc)
    assert isinstance(outcome, ValidationFailure)
    assert outcome.message == "taken"


def test_cancelled_outcome_is_silent() -> None:
    h = _Harness()
    with pytest.raises(RequestCancelledError) as exc_info:
        h.classifier.settle(Cancelled("/api/users"))
    assert exc_info.value.key == "/api/users"
    assert h.notifier.messages == []


# =============================================================================
# Envelope parsing
# =============================================================================


def test_parse_error_body_shapes() -> None:
    assert isinstance(parse_error_body(None), NoBody)
    assert isinstance(parse_error_body(""), NoBody)
    assert isinstance(parse_error_body("plain text"), BareError)

    enveloped = parse_error_body({"errors": {"email": "is required"}, "message": "Invalid"})
    assert isinstance(enveloped, EnvelopedError)
    assert enveloped.errors == {"email": ["is required"]}
    assert enveloped.first_error() == "is required"
    assert enveloped.message == "Invalid"

    bare = parse_error_body({"error": "nope", "message": 12})
    assert isinstance(bare, BareError)
    assert bare.error == "nope"
    assert bare.message is None


def test_first_error_empty() -> None:
    assert EnvelopedError(errors={}).first_error() is None
    assert EnvelopedError(errors={"email": []}).first_error() is None


def test_response_envelope_from_body() -> None:
    wrapped = ResponseEnvelope.from_body({"code": 0, "data": {"id": 1}, "message": "ok"})
    assert wrapped.data == {"id": 1}
    assert wrapped.message == "ok"
    assert wrapped.code == 0

    bare = ResponseEnvelope.from_body([{"id": 1}])
    assert bare.data == [{"id": 1}]
    assert bare.message is None
