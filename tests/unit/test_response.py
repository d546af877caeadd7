r"""Unit tests for request and response snapshots."""

from __future__ import annotations

import httpx
import pytest
from coola.equality import objects_are_equal

from apirequest.exceptions import APIRequestError, ErrorKind
from apirequest.response import (
    Outcome,
    RequestObject,
    ResponseObject,
    snapshot_request,
    snapshot_response,
)
from apirequest.utils import REMOVED_HEADER_MESSAGE

TEST_URL = "https://api.example.com/2.0/files/123"
REQUEST = RequestObject(url=TEST_URL, method="GET")

######################################
#     Tests for snapshot_request     #
######################################


def test_snapshot_request() -> None:
    request = httpx.Request(
        "GET", TEST_URL, params={"fields": "id"}, headers={"Authorization": "Bearer token"}
    )
    snapshot = snapshot_request(request)
    assert snapshot.url == f"{TEST_URL}?fields=id"
    assert snapshot.method == "GET"
    headers = {key.lower(): value for key, value in snapshot.headers.items()}
    assert headers["authorization"] == REMOVED_HEADER_MESSAGE
    assert request.headers["Authorization"] == "Bearer token"


#######################################
#     Tests for snapshot_response     #
#######################################


def test_snapshot_response_json() -> None:
    response = httpx.Response(200, json={"id": "123", "type": "file"})
    snapshot = snapshot_response(response, REQUEST)
    assert objects_are_equal(snapshot.data, {"id": "123", "type": "file"})
    assert snapshot.status == 200
    assert snapshot.request is REQUEST
    assert snapshot.headers["content-type"] == "application/json"


def test_snapshot_response_text() -> None:
    response = httpx.Response(200, text="hello", headers={"content-type": "text/plain"})
    assert snapshot_response(response, REQUEST).data == "hello"


def test_snapshot_response_bytes() -> None:
    response = httpx.Response(
        200, content=b"\x89PNG\x00", headers={"content-type": "image/png"}
    )
    assert snapshot_response(response, REQUEST).data == b"\x89PNG\x00"


def test_snapshot_response_empty_body() -> None:
    assert snapshot_response(httpx.Response(204), REQUEST).data is None


def test_snapshot_response_holds_no_transport_objects() -> None:
    snapshot = snapshot_response(httpx.Response(200, json={}), REQUEST)
    assert isinstance(snapshot.headers, dict)
    assert not any(isinstance(value, httpx.Response) for value in vars(snapshot).values())


#############################
#     Tests for Outcome     #
#############################


def test_outcome_success() -> None:
    response = ResponseObject(request=REQUEST, status=200)
    outcome = Outcome(response=response)
    assert outcome.ok
    assert outcome.unwrap() is response


def test_outcome_error() -> None:
    error = APIRequestError("failure", kind=ErrorKind.PERMANENT, request=REQUEST)
    outcome = Outcome(error=error)
    assert not outcome.ok
    with pytest.raises(APIRequestError, match="failure"):
        outcome.unwrap()


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {
            "error": RuntimeError("boom"),
            "response": ResponseObject(request=REQUEST, status=200),
        },
    ],
)
def test_outcome_requires_exactly_one(kwargs: dict) -> None:
    with pytest.raises(ValueError, match="exactly one"):
        Outcome(**kwargs)
