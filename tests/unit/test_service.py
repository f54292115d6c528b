# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import logging

import pytest

from beam.auth import BasicAuth, BearerAuth
from beam.environment import CachePolicy, Environment
from beam.errors import BadInputError, ErrorCategory
from beam.http.adapters import StubTransport
from beam.http.models import TransportOutcome
from beam.request import BodyParameters, HTTPMethod, Request, UrlParameters
from beam.response import ErrorResponse, JsonResponse
from beam.service import DefaultService, build_transport_request
from beam.status import Status
from beam.task import Task

BASE_URL = "https://api.example.com"


def make_env(**overrides):
    values = {
        "name": "test",
        "base_url": BASE_URL,
        "headers": {"Accept": "application/json", "Content-Type": "application/json"},
        "cache_policy": CachePolicy.USE_PROTOCOL,
    }
    values.update(overrides)
    return Environment(**values)


def test_build_composes_url_with_version():
    built = build_transport_request(make_env(), Request(path="users/42", version="v2"))
    assert built.url == f"{BASE_URL}/v2/users/42"
    assert built.method == "GET"
    assert built.body is None
    assert built.timeout == 10.0


def test_build_url_parameters_become_query_string():
    built = build_transport_request(make_env(), Request(path="search", parameters=UrlParameters({"q": "x"})))
    assert built.url == f"{BASE_URL}/search?q=x"
    assert built.body is None


def test_build_url_parameters_encode_scalars():
    request = Request(path="search", parameters=UrlParameters({"page": 2, "exact": True, "term": "abc"}))
    built = build_transport_request(make_env(), request)
    assert built.url.startswith(f"{BASE_URL}/search?")
    query = built.url.split("?", 1)[1]
    assert sorted(query.split("&")) == ["exact=true", "page=2", "term=abc"]


def test_build_body_parameters_become_json_body():
    request = Request(path="search", method=HTTPMethod.POST, parameters=BodyParameters({"q": "x"}))
    built = build_transport_request(make_env(), request)
    assert built.url == f"{BASE_URL}/search"
    assert built.method == "POST"
    assert json.loads(built.body) == {"q": "x"}


@pytest.mark.parametrize("value", [None, {"nested": 1}, [1, 2], object(), float("nan")])
def test_build_rejects_non_scalar_parameter_values(value):
    for parameters in (BodyParameters({"q": value}), UrlParameters({"q": value})):
        if isinstance(parameters, UrlParameters) and isinstance(value, float):
            continue
        with pytest.raises(BadInputError):
            build_transport_request(make_env(), Request(path="x", parameters=parameters))


@pytest.mark.parametrize("base_url", ["not a url", "", "ftp://files.example.com", "http://"])
def test_build_rejects_invalid_urls(base_url):
    with pytest.raises(BadInputError) as excinfo:
        build_transport_request(make_env(base_url=base_url), Request(path="x"))
    assert excinfo.value.request.path == "x"


def test_build_merges_headers_request_wins():
    env = make_env(headers={"A": "1", "B": "2"})
    built = build_transport_request(env, Request(path="x", headers={"B": "9", "C": "3"}))
    assert built.headers == {"A": "1", "B": "9", "C": "3"}


def test_build_adds_authorization_from_authentication():
    built = build_transport_request(make_env(), Request(path="x", authentication=BearerAuth(token="abc")))
    assert built.headers["Authorization"] == "Bearer abc"

    basic = build_transport_request(make_env(), Request(path="x", authentication=BasicAuth(user="u", password="p")))
    assert basic.headers["Authorization"] == "Basic dTpw"


def test_build_explicit_authorization_header_wins():
    request = Request(path="x", headers={"authorization": "Token manual"}, authentication=BearerAuth(token="abc"))
    built = build_transport_request(make_env(), request)
    assert built.headers["authorization"] == "Token manual"
    assert "Authorization" not in built.headers


def test_build_applies_cache_policy_without_overriding_request():
    env = make_env(cache_policy=CachePolicy.RELOAD_IGNORING_CACHE)
    built = build_transport_request(env, Request(path="x"))
    assert built.headers["Cache-Control"] == "no-cache"
    assert built.headers["Pragma"] == "no-cache"

    overridden = build_transport_request(env, Request(path="x", headers={"cache-control": "max-age=60"}))
    assert overridden.headers["cache-control"] == "max-age=60"
    assert "Cache-Control" not in overridden.headers


def test_build_sets_timeout_from_request():
    built = build_transport_request(make_env(), Request(path="x", timeout_interval=2.5))
    assert built.timeout == 2.5


def test_execute_delivers_json_response_and_returns_token():
    transport = StubTransport({f"{BASE_URL}/users": TransportOutcome(status_code=200, content=b'[{"id": 1}]')})
    service = DefaultService(make_env(), transport=transport)
    received = []

    token = service.execute(Request(path="users"), received.append)

    assert token is not None
    assert len(received) == 1
    assert isinstance(received[0], JsonResponse)
    assert received[0].value == [{"id": 1}]
    assert transport.requests[0].headers["Accept"] == "application/json"


def test_execute_with_bad_input_calls_back_synchronously():
    transport = StubTransport()
    service = DefaultService(make_env(base_url="not a url"), transport=transport)
    received = []

    token = service.execute(Request(path="search"), received.append)

    assert token is None
    assert len(received) == 1
    response = received[0]
    assert isinstance(response, ErrorResponse)
    assert response.status is Status.UNKNOWN
    assert isinstance(response.error, BadInputError)
    assert response.category is ErrorCategory.BAD_INPUT
    assert transport.requests == []


def test_execute_transport_failure_is_unknown_error():
    service = DefaultService(make_env(), transport=StubTransport())
    received = []
    service.execute(Request(path="unreachable"), received.append)
    assert isinstance(received[0], ErrorResponse)
    assert received[0].status is Status.UNKNOWN
    assert received[0].category is ErrorCategory.CONNECTION_ERROR


def test_execute_callback_exception_is_logged_not_raised(caplog):
    transport = StubTransport({f"{BASE_URL}/x": TransportOutcome(status_code=200, content=b"{}")})
    service = DefaultService(make_env(), transport=transport)

    def callback(_response):
        raise RuntimeError("callback bug")

    with caplog.at_level(logging.ERROR, logger="beam.service"):
        token = service.execute(Request(path="x"), callback)
    assert token is not None
    assert "raised" in caplog.text


def test_execute_logs_request_description_at_debug(caplog):
    transport = StubTransport({f"{BASE_URL}/x": TransportOutcome(status_code=200, content=b"{}")})
    service = DefaultService(make_env(), transport=transport)
    with caplog.at_level(logging.DEBUG, logger="beam.service"):
        service.execute(Request(path="x"), lambda _response: None)
    assert "Path = x" in caplog.text


def test_deferred_call_cancel_delivers_single_cancelled_response():
    transport = StubTransport({f"{BASE_URL}/slow": TransportOutcome(status_code=200, content=b"{}")}, deferred=True)
    service = DefaultService(make_env(), transport=transport)
    received = []

    token = service.execute(Request(path="slow"), received.append)
    assert token.active is True
    assert received == []

    token.cancel()
    token.cancel()

    assert token.active is False
    assert len(received) == 1
    assert isinstance(received[0], ErrorResponse)
    assert received[0].status is Status.UNKNOWN
    assert received[0].category is ErrorCategory.CANCELLED
    assert transport.release() == 0


def test_independent_calls_complete_independently():
    transport = StubTransport(
        {
            f"{BASE_URL}/a": TransportOutcome(status_code=200, content=b'"a"'),
            f"{BASE_URL}/b": TransportOutcome(status_code=503),
        },
        deferred=True,
    )
    service = DefaultService(make_env(), transport=transport)
    received = []
    token_a = service.execute(Request(path="a"), received.append)
    service.execute(Request(path="b"), received.append)
    token_a.cancel()
    assert transport.release() == 1
    assert [r.status for r in received] == [Status.UNKNOWN, Status.SERVICE_UNAVAILABLE]


def test_service_context_manager_closes_transport():
    transport = StubTransport()
    with DefaultService(make_env(), transport=transport):
        pass
    assert transport.closed is True


def test_task_forwards_to_service():
    transport = StubTransport({f"{BASE_URL}/users": TransportOutcome(status_code=200, content=b"[]")})
    service = DefaultService(make_env(), transport=transport)
    received = []
    token = Task(Request(path="users")).run(service, received.append)
    assert token is not None
    assert received[0].value == []


def test_task_subclass_can_wrap_callback():
    transport = StubTransport({f"{BASE_URL}/users": TransportOutcome(status_code=200, content=b"[1, 2]")})
    service = DefaultService(make_env(), transport=transport)

    class CountingTask(Task):
        def run(self, service, callback):
            def wrapped(response):
                callback(len(response.value))

            return super().run(service, wrapped)

    received = []
    CountingTask(Request(path="users")).run(service, received.append)
    assert received == [2]


def test_execute_with_unusual_path_characters_is_percent_encoded():
    transport = StubTransport()
    service = DefaultService(make_env(), transport=transport)
    received = []

    token = service.execute(Request(path="a b/%zz:::[]"), received.append)

    assert token is not None
    assert len(transport.requests) == 1
    assert transport.requests[0].url.startswith(f"{BASE_URL}/a%20b/")
