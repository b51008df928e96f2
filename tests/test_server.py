"""
Tests for the HOC REST API and its client
"""

import pytest
from fastapi.testclient import TestClient

from hoc.core.config import VERSION
from hoc.server import client as client_module
from hoc.server.app import app
from hoc.server.client import HocClient

client = TestClient(app)


def test_health():
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION
    assert data["predicates"] > 0


def test_predicates_listing():
    data = client.get("/api/predicates").json()
    assert "integer?" in data["predicates"]
    assert "any/c" in data["predicates"]


def test_parse_function_contract():
    """Parsing reports kind, arity and nesting depth"""
    data = client.post("/api/parse", json={"contract": "(->/c (->/c even? odd?) even? even?)"}).json()
    assert data["success"] is True
    assert data["contract"] == "(-> (-> even? odd?) even? even?)"
    assert data["kind"] == "function"
    assert data["arity"] == 2
    assert data["depth"] == 2


def test_parse_error():
    data = client.post("/api/parse", json={"contract": "(-> prime? integer?)"}).json()
    assert data["success"] is False
    assert "Unknown predicate" in data["error"]


def test_check_passes():
    data = client.post("/api/check", json={"contract": "(and/c integer? positive?)", "value": 3}).json()
    assert data == {"success": True, "passed": True, "violation": None, "report": None, "error": None}


def test_check_violation():
    """A failing value returns the blame and its report"""
    data = client.post("/api/check", json={"contract": "integer?", "value": 10.1, "name": "x"}).json()
    assert data["success"] is True
    assert data["passed"] is False
    assert data["violation"]["expected"] == "integer?"
    assert data["violation"]["actual"] == "10.1"
    assert "given: 10.1" in data["report"]


def test_check_rejects_function_contracts():
    data = client.post("/api/check", json={"contract": "(-> integer? integer?)", "value": 1}).json()
    assert data["success"] is False
    assert "function contract" in data["error"]


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


def test_client_posts_check(monkeypatch):
    """HocClient sends the contract and value as JSON"""
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse({"success": True, "passed": True})

    monkeypatch.setattr(client_module.requests, "post", fake_post)

    hoc_client = HocClient("http://hoc.test/", timeout=3)
    assert hoc_client.check("integer?", 5)["passed"] is True
    assert calls == [("http://hoc.test/api/check", {"contract": "integer?", "value": 5, "name": ""}, 3)]


def test_client_reads_predicates(monkeypatch):
    monkeypatch.setattr(
        client_module.requests, "get",
        lambda url, timeout=None: FakeResponse({"predicates": ["even?"]}),
    )
    assert HocClient("http://hoc.test").predicates() == ["even?"]


def test_client_default_url_from_settings(monkeypatch):
    """Without a URL the client uses HOC_HOST and HOC_PORT"""
    from hoc.core import config

    monkeypatch.setenv("HOC_HOST", "example.internal")
    monkeypatch.setenv("HOC_PORT", "9001")
    config.reset_settings()
    try:
        assert HocClient().base_url == "http://example.internal:9001"
    finally:
        monkeypatch.undo()
        config.reset_settings()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
