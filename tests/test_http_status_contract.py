# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportMissingParameterType=false
from unittest.mock import Mock, patch

import pytest
from requests.cookies import RequestsCookieJar

from courier.networking.classifier import classify, decode_error_model
from courier.networking.client import HttpClient
from courier.networking.config import ClientConfig
from courier.networking.errors import (
    ApiErrorResponse,
    ClientError,
    ServerError,
    UnexpectedStatusError,
)


def _mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "https://api.example.com/items",
    reason: str = "OK",
):
    response = Mock()
    response.content = content
    response.status_code = status
    response.url = url
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    response.headers = {"Content-Type": "application/json"}
    response.cookies = RequestsCookieJar()
    return response


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_2xx_is_success(status):
    assert classify(status, b"") is None


@pytest.mark.parametrize("status", [400, 401, 404, 422, 499])
def test_4xx_is_client_error(status):
    error = classify(status, b"")

    assert isinstance(error, ClientError)
    assert error.status_code == status


@pytest.mark.parametrize("status", [500, 502, 503, 599])
def test_5xx_is_server_error_with_status_message(status):
    error = classify(status, b'{"message": "ignored"}', ApiErrorResponse)

    assert isinstance(error, ServerError)
    assert error.message == f"Server error occurred, Status Code: {status}"


@pytest.mark.parametrize("status", [100, 199, 300, 302, 304, 399, 600])
def test_other_statuses_are_unexpected(status):
    error = classify(status, b"")

    assert isinstance(error, UnexpectedStatusError)
    assert error.status_code == status


def test_404_with_decodable_body_carries_model():
    error = classify(404, b'{"message": "gone", "code": "E1"}', ApiErrorResponse)

    assert error.model == ApiErrorResponse(message="gone", code="E1")
    assert error.message == "gone"


@pytest.mark.parametrize("body", [b"", b"<html>not json</html>", b"[1, 2]"])
def test_404_with_undecodable_body_has_no_model(body):
    error = classify(404, body, ApiErrorResponse)

    assert error.model is None
    assert error.message == "Client error occurred"


def test_decode_error_model_without_model_is_none():
    assert decode_error_model(b'{"message": "x"}', None) is None


def test_get_404_is_client_error_with_status_metadata():
    client = HttpClient(ClientConfig(base_url="https://api.example.com"))

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _mock_response(
            content=b'{"message": "not here"}',
            status=404,
            reason="Not Found",
        )
        result = client.get("/missing")

    assert not result.ok
    assert isinstance(result.error, ClientError)
    assert result.error.message == "not here"
    assert result.meta["status_code"] == 404
    assert result.meta["reason"] == "Not Found"


def test_get_500_is_server_error_with_status_metadata():
    client = HttpClient(ClientConfig(base_url="https://api.example.com"))

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _mock_response(
            content=b"server error",
            status=500,
            reason="Internal Server Error",
        )
        result = client.get("/error")

    assert isinstance(result.error, ServerError)
    assert result.meta["status_code"] == 500
    assert result.meta["final_error"] == "ServerError"


def test_get_302_without_redirect_is_unexpected_status():
    client = HttpClient(
        ClientConfig(base_url="https://api.example.com", allow_redirects=False)
    )

    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _mock_response(status=302, reason="Found")
        result = client.get("/moved")

    assert isinstance(result.error, UnexpectedStatusError)
    assert result.error.message == "Unknown client error, Status Code: 302"
    assert mock_request.call_args.kwargs["allow_redirects"] is False
