# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from beam.auth import BasicAuth, BearerAuth
from beam.cli.main import build_parser, build_request, main, response_to_dict
from beam.config import HttpSettings
from beam.environment import CachePolicy, Environment
from beam.http.adapters import StubTransport
from beam.http.models import TransportOutcome
from beam.request import BodyParameters, DataType, HTTPMethod, UrlParameters
from beam.response import ErrorResponse
from beam.service import DefaultService
from beam.status import Status

BASE_URL = "https://api.example.com"


def make_service(outcomes):
    env = Environment(name="cli-test", base_url=BASE_URL, headers={"Accept": "application/json"}, cache_policy=CachePolicy.USE_PROTOCOL)
    transport = StubTransport(outcomes)
    return DefaultService(env, transport=transport), transport


def test_build_parser_and_request():
    parser = build_parser()
    args = parser.parse_args(
        [BASE_URL, "search", "--method", "POST", "--version", "v1", "-H", "X-Trace: abc", "--body", "q=x", "--bearer", "tok", "--raw"]
    )
    request = build_request(args, parser, HttpSettings(timeout=4.0))
    assert request.path == "search"
    assert request.method is HTTPMethod.POST
    assert request.version == "v1"
    assert request.headers == {"X-Trace": "abc"}
    assert request.parameters == BodyParameters({"q": "x"})
    assert request.authentication == BearerAuth(token="tok")
    assert request.data_type is DataType.DATA
    assert request.timeout_interval == 4.0


def test_build_request_query_and_basic():
    parser = build_parser()
    args = parser.parse_args([BASE_URL, "users", "--query", "page=2", "--basic", "u:p", "--timeout", "1.5"])
    request = build_request(args, parser, HttpSettings())
    assert request.parameters == UrlParameters({"page": "2"})
    assert request.authentication == BasicAuth(user="u", password="p")
    assert request.timeout_interval == 1.5


def test_build_request_rejects_malformed_pairs():
    parser = build_parser()
    args = parser.parse_args([BASE_URL, "users", "--query", "novalue"])
    with pytest.raises(SystemExit):
        build_request(args, parser, HttpSettings())


def test_main_prints_json_response(capsys):
    service, transport = make_service({f"{BASE_URL}/users?page=2": TransportOutcome(status_code=200, content=b'{"users": []}')})
    code = main([BASE_URL, "users", "--query", "page=2", "--json"], service=service)
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["kind"] == "JsonResponse"
    assert payload["status"] == 200
    assert payload["value"] == {"users": []}
    assert transport.closed is True


def test_main_pretty_prints_error_and_fails(capsys):
    service, _ = make_service({f"{BASE_URL}/missing": TransportOutcome(status_code=404)})
    code = main([BASE_URL, "missing"], service=service)
    output = capsys.readouterr().out
    assert code == 1
    assert "Status: 404 (NOT_FOUND)" in output


def test_main_reports_bad_input(capsys):
    env = Environment(name="cli-test", base_url="not a url", headers={})
    service = DefaultService(env, transport=StubTransport())
    code = main(["not a url", "users"], service=service)
    output = capsys.readouterr().out
    assert code == 1
    assert "Request could not be built" in output


def test_response_to_dict_error_variant():
    payload = response_to_dict(ErrorResponse(Status.UNKNOWN, None))
    assert payload == {
        "kind": "ErrorResponse",
        "status": 0,
        "success": False,
        "error": None,
        "error_type": None,
        "category": "NONE",
    }
