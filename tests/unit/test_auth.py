# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import base64

import pytest

from beam.auth import Authentication, BasicAuth, BearerAuth, CustomAuth, NoAuth


@pytest.mark.parametrize(
    ("user", "password"),
    [("alice", "s3cret"), ("bob", ""), ("", "pw"), ("üser", "pässword"), ("carol", "with:colons:inside")],
)
def test_basic_auth_round_trips(user, password):
    auth = BasicAuth(user=user, password=password)
    parsed = Authentication.parse(auth.serialize())
    assert isinstance(parsed, BasicAuth)
    assert parsed == auth
    assert parsed.user == user
    assert parsed.password == password


def test_basic_auth_serializes_base64_credentials():
    assert BasicAuth(user="user", password="pass").serialize() == "Basic dXNlcjpwYXNz"


@pytest.mark.parametrize("token", ["abc", "eyJhbGciOiJIUzI1NiJ9.e30.sig", ""])
def test_bearer_round_trips(token):
    auth = BearerAuth(token=token)
    assert auth.serialize() == f"Bearer {token}"
    assert Authentication.parse(auth.serialize()) == auth


def test_none_serializes_to_empty_string_and_back():
    assert NoAuth().serialize() == ""
    assert isinstance(Authentication.parse(""), NoAuth)
    assert isinstance(Authentication.parse(None), NoAuth)
    assert NoAuth().is_none is True


def test_custom_value_is_verbatim():
    auth = CustomAuth(value="Token abc123")
    assert auth.serialize() == "Token abc123"
    parsed = Authentication.parse("Token abc123")
    assert isinstance(parsed, CustomAuth)
    assert parsed.value == "Token abc123"


def test_malformed_basic_payload_falls_back_to_none():
    assert isinstance(Authentication.parse("Basic not-base64!!"), NoAuth)
    no_colon = base64.b64encode(b"justuser").decode("ascii")
    assert isinstance(Authentication.parse(f"Basic {no_colon}"), NoAuth)
    bad_utf8 = base64.b64encode(b"\xff\xfe:\xfd").decode("ascii")
    assert isinstance(Authentication.parse(f"Basic {bad_utf8}"), NoAuth)


def test_equality_is_defined_by_serialized_value():
    assert CustomAuth(value="Bearer xyz") == BearerAuth(token="xyz")
    assert CustomAuth(value="") == NoAuth()
    assert BearerAuth(token="a") != BearerAuth(token="b")
    assert len({BearerAuth(token="a"), CustomAuth(value="Bearer a")}) == 1
    assert BearerAuth(token="a") != "Bearer a"


def test_describe_does_not_leak_basic_password():
    assert BasicAuth(user="alice", password="secret").describe() == "Standard - user=alice"
    assert NoAuth().describe() == "No authorization"
    assert BearerAuth(token="t").describe() == "Bearer - token=t"
    assert CustomAuth(value="v").describe() == "Custom - value=v"
