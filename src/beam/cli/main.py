# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Beam CLI: issue one request against an environment and print the response."""

from __future__ import annotations

import argparse
import json
import sys
import threading
from typing import Any

from ..auth import Authentication, BasicAuth, BearerAuth, NoAuth
from ..config import HttpSettings, load_http_settings
from ..environment import Environment
from ..errors import error_category_to_reason
from ..http import create_default_transport
from ..log import setup_logging
from ..request import BodyParameters, DataType, HTTPMethod, Parameters, Request, UrlParameters
from ..response import DataResponse, ErrorResponse, JsonResponse, Response
from ..service import DefaultService
from ..task import Task

CLI_TEXT_TRUNCATION_BYTES = 4096


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Beam HTTP client: run a single request against an API environment")
    parser.add_argument("base_url", help="Environment base URL, e.g. https://api.example.com")
    parser.add_argument("path", help="Request path relative to the base URL (and version)")
    parser.add_argument("--method", choices=[m.value for m in HTTPMethod], default=HTTPMethod.GET.value)
    parser.add_argument("--version", dest="api_version", default=None, help="API version path segment")
    parser.add_argument("--env-name", default="cli", help="Environment name used in logs")
    parser.add_argument("-H", "--header", action="append", default=[], metavar="NAME:VALUE", help="Extra request header")
    params = parser.add_mutually_exclusive_group()
    params.add_argument("--query", action="append", default=[], metavar="KEY=VALUE", help="Query parameter")
    params.add_argument("--body", action="append", default=[], metavar="KEY=VALUE", help="JSON body field")
    auth = parser.add_mutually_exclusive_group()
    auth.add_argument("--basic", metavar="USER:PASSWORD", help="Basic authentication")
    auth.add_argument("--bearer", metavar="TOKEN", help="Bearer token authentication")
    parser.add_argument("--raw", action="store_true", help="Treat the response body as raw data instead of JSON")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    return parser


def _split_pairs(items: list[str], separator: str, parser: argparse.ArgumentParser, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition(separator)
        key = key.strip()
        if not sep or not key:
            parser.error(f"{option} expects NAME{separator}VALUE, got {item!r}")
        pairs[key] = value.strip() if separator == ":" else value
    return pairs


def _authentication(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Authentication:
    if args.basic:
        user, sep, password = args.basic.partition(":")
        if not sep:
            parser.error("--basic expects USER:PASSWORD")
        return BasicAuth(user=user, password=password)
    if args.bearer:
        return BearerAuth(token=args.bearer)
    return NoAuth()


def build_request(args: argparse.Namespace, parser: argparse.ArgumentParser, settings: HttpSettings) -> Request:
    parameters: Parameters | None = None
    if args.query:
        parameters = UrlParameters(_split_pairs(args.query, "=", parser, "--query"))
    elif args.body:
        parameters = BodyParameters(_split_pairs(args.body, "=", parser, "--body"))
    headers = _split_pairs(args.header, ":", parser, "--header") or None
    return Request(
        path=args.path,
        method=HTTPMethod(args.method),
        version=args.api_version,
        data_type=DataType.DATA if args.raw else DataType.JSON,
        parameters=parameters,
        authentication=_authentication(args, parser),
        headers=headers,
        timeout_interval=args.timeout if args.timeout is not None else settings.timeout,
    )


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max(0, max_bytes - len(suffix.encode("utf-8")))
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def response_to_dict(response: Response) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "kind": type(response).__name__,
        "status": response.status.code,
        "success": response.is_success,
    }
    if isinstance(response, JsonResponse):
        payload["value"] = response.json.value
        payload["parse_error"] = str(response.json.error) if response.json.error else None
    elif isinstance(response, DataResponse):
        payload["bytes"] = len(response.data)
        payload["text"] = _truncate_text_bytes(response.data.decode("utf-8", errors="replace"), CLI_TEXT_TRUNCATION_BYTES)
    elif isinstance(response, ErrorResponse):
        payload["error"] = str(response.error) if response.error is not None else None
        payload["error_type"] = type(response.error).__name__ if response.error is not None else None
        payload["category"] = response.category.value
    return payload


def _print_json(response: Response) -> None:
    json.dump(response_to_dict(response), sys.stdout, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def _pretty_print(response: Response) -> None:
    print(f"[Beam] Status: {response.status.code} ({response.status.name})")
    if isinstance(response, JsonResponse):
        if response.json.error is not None:
            print(f"Parse error: {response.json.error}")
        else:
            rendered = json.dumps(response.json.value, indent=2, sort_keys=True, default=str)
            print(_truncate_text_bytes(rendered, CLI_TEXT_TRUNCATION_BYTES))
    elif isinstance(response, DataResponse):
        print(f"Data: {len(response.data)} bytes")
        print(_truncate_text_bytes(response.data.decode("utf-8", errors="replace"), CLI_TEXT_TRUNCATION_BYTES))
    elif isinstance(response, ErrorResponse):
        reason = error_category_to_reason(response.category)
        if reason:
            print(f"Reason: {reason}")
        if response.error is not None:
            print(f"Error: {type(response.error).__name__}: {response.error}")


def _exit_code(response: Response) -> int:
    if isinstance(response, JsonResponse):
        return 0 if response.json.ok else 1
    return 0 if response.is_success else 1


def main(argv: list[str] | None = None, service: DefaultService | None = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    request = build_request(args, parser, settings)
    if service is None:
        environment = Environment(name=args.env_name, base_url=args.base_url.rstrip("/"))
        service = DefaultService(environment, transport=create_default_transport(settings), settings=settings)

    finished = threading.Event()
    received: list[Response] = []

    def on_response(response: Response) -> None:
        received.append(response)
        finished.set()

    with service:
        Task(request).run(service, on_response)
        finished.wait()

    response = received[0]
    if args.json:
        _print_json(response)
    else:
        _pretty_print(response)

    return _exit_code(response)


if __name__ == "__main__":
    raise SystemExit(main())
