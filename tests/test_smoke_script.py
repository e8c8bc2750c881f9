"""
tests/test_smoke_script.py -- Run scripts/smoke_test.py in-process against the app.

TestClient exposes the same get()/post(json=, headers=) surface as a
requests.Session, so the smoke sequence runs unchanged without a live server.

Covers:
  - Every step passes against a fresh store
  - A re-run against the same store still passes (409 on register is tolerated)
  - A server that lets unauthenticated requests through is reported as a failure
"""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from auth.store import UserStore
from scripts.smoke_test import run_smoke_test

BASE_URL = "http://testserver"


def test_smoke_sequence_passes(api_client: tuple[TestClient, UserStore]) -> None:
    client, _ = api_client
    lines: list[str] = []
    failures = run_smoke_test(client, BASE_URL, out=lines.append)
    assert failures == 0, "\n".join(lines)
    assert any("denied without token" in line and "[+]" in line for line in lines)


def test_smoke_sequence_is_rerunnable(api_client: tuple[TestClient, UserStore]) -> None:
    client, _ = api_client
    assert run_smoke_test(client, BASE_URL, out=lambda _line: None) == 0
    lines: list[str] = []
    assert run_smoke_test(client, BASE_URL, out=lines.append) == 0
    assert any("already registered" in line for line in lines)


def _response(status_code: int, body: dict) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    return resp


def test_open_protected_route_is_a_failure() -> None:
    user = {"id": "1", "name": "John Doe", "email": "john@example.com"}
    client = MagicMock()
    client.get.side_effect = [
        _response(200, {"message": "Welcome"}),
        _response(200, {"success": True, "data": user}),
        _response(200, {"success": True, "user": user}),
        # No token, but the server answered 200 anyway
        _response(200, {"success": True, "user": user}),
    ]
    client.post.side_effect = [
        _response(201, {"success": True, "data": {**user, "token": "t"}}),
        _response(200, {"success": True, "data": {**user, "token": "t"}}),
    ]

    assert run_smoke_test(client, BASE_URL, out=lambda _line: None) == 1
