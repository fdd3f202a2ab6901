import httpx
import pytest

from a2a_planner import client as client_mod
from a2a_planner.client import A2AClient, A2AClientError


def _response(payload, status=200):
    return httpx.Response(status, json=payload, request=httpx.Request("POST", "http://x"))


def test_send_builds_message_send_request(monkeypatch):
    captured = {}
    result = {"id": "T1", "contextId": "C1", "status": {"message": {"parts": [{"kind": "text", "text": "Plan!"}]}}}

    def fake_post(url, json=None, timeout=None):
        captured.update(url=url, json=json)
        return _response({"jsonrpc": "2.0", "id": json["id"], "result": result})

    monkeypatch.setattr(client_mod.httpx, "post", fake_post)
    c = A2AClient("http://localhost:8000/")
    assert c.ask("Plan a move", context_id="C1") == "Plan!"
    assert captured["url"] == "http://localhost:8000/a2a/agent/plannerAgent"
    body = captured["json"]
    assert body["method"] == "message/send"
    assert body["params"]["message"]["contextId"] == "C1"
    assert body["params"]["message"]["parts"] == [{"kind": "text", "text": "Plan a move"}]


def test_json_rpc_error_raises(monkeypatch):
    def fake_post(url, json=None, timeout=None):
        return _response({"jsonrpc": "2.0", "id": "1", "error": {"code": -32602, "message": "Agent 'x' not found"}}, 404)

    monkeypatch.setattr(client_mod.httpx, "post", fake_post)
    with pytest.raises(A2AClientError) as exc:
        A2AClient("http://localhost:8000", agent_id="x").send("hi")
    assert exc.value.code == -32602


def test_request_is_a_valid_message_send_envelope(monkeypatch):
    captured = {}

    def fake_post(url, json=None, timeout=None):
        captured.update(json=json)
        return _response({"jsonrpc": "2.0", "id": json["id"], "result": {"status": {}}})

    monkeypatch.setattr(client_mod.httpx, "post", fake_post)
    A2AClient("http://localhost:8000").send("hi", task_id="T1")
    body = captured["json"]
    assert body["jsonrpc"] == "2.0"
    assert body["id"]
    assert body["params"]["message"]["kind"] == "message"
    assert body["params"]["message"]["role"] == "user"
    assert body["params"]["message"]["taskId"] == "T1"
    assert "contextId" not in body["params"]["message"]
    assert "configuration" not in body["params"]


def test_non_json_error_page_raises_http_status_error(monkeypatch):
    def fake_post(url, json=None, timeout=None):
        return httpx.Response(502, text="<html>Bad Gateway</html>", request=httpx.Request("POST", url))

    monkeypatch.setattr(client_mod.httpx, "post", fake_post)
    with pytest.raises(httpx.HTTPStatusError):
        A2AClient("http://localhost:8000").send("hi")


def test_non_json_success_raises_client_error(monkeypatch):
    def fake_post(url, json=None, timeout=None):
        return httpx.Response(200, text="ok", request=httpx.Request("POST", url))

    monkeypatch.setattr(client_mod.httpx, "post", fake_post)
    with pytest.raises(A2AClientError):
        A2AClient("http://localhost:8000").send("hi")
